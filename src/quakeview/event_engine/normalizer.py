"""Record normalization: raw feed rows -> Event.

A raw row is a mapping of strings with the USGS feed column names
(id, time, latitude, longitude, depth, mag, place, type). normalize_row()
is pure; normalize_rows() applies the configured invalid-row policy to a
whole batch and logs what it kept or dropped.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from quakeview.config import EngineConfig
from quakeview.event_engine.models import Event, InvalidRecord
from quakeview.utils.logging import get_logger

logger = get_logger(__name__)

RAW_COLUMNS = ("id", "time", "latitude", "longitude", "depth", "mag", "place", "type")

# raw column -> Event attribute
_NUMERIC_COLUMNS = {
    "latitude": "latitude",
    "longitude": "longitude",
    "depth": "depth",
    "mag": "magnitude",
}

# leading date of an ISO-8601 timestamp
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}")


def extract_short_place(place: str) -> str:
    """Trailing comma-separated segment of a place description.

    "5 km NE of X, California" -> "California". Without a comma the whole
    stripped text is returned; a trailing comma gives "".
    """
    return _as_text(place).rpartition(",")[2].strip()


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def _parse_number(value: Any) -> float:
    """float(value), or NaN when value is blank or not a real number."""
    text = _as_text(value).strip()
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def parse_timestamp(value: Any, display_tz: str = "UTC") -> pd.Timestamp:
    """Parse an ISO-8601-like timestamp into display_tz.

    Naive timestamps are taken as UTC (the feed reports origin times in UTC).

    Raises:
        ValueError: If value is blank or not a parseable timestamp.
    """
    text = _as_text(value).strip()
    if not text:
        raise ValueError("empty timestamp")
    if not _ISO_DATE_RE.match(text):
        raise ValueError(f"not an ISO-8601 timestamp: {text!r}")
    ts = pd.Timestamp(text)
    if pd.isna(ts):
        raise ValueError(f"not a timestamp: {text!r}")
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(display_tz)


def normalize_row(
    row: Mapping[str, Any],
    *,
    display_tz: str = "UTC",
    strict: bool = False,
) -> Event:
    """Convert one raw row into an Event.

    Args:
        row: Mapping with the RAW_COLUMNS keys (missing keys read as blank).
        display_tz: Zone whose calendar defines the event's year/month/day.
        strict: If True, an unparseable numeric field raises InvalidRecord
            instead of being stored as NaN.

    Returns:
        The normalized Event.

    Raises:
        InvalidRecord: If the timestamp does not parse, or (strict only) a
            numeric field does not parse.
    """
    row_id = _as_text(row.get("id")).strip()
    raw_time = row.get("time")
    try:
        occurred_at = parse_timestamp(raw_time, display_tz)
    except ValueError as e:
        raise InvalidRecord(
            f"row {row_id!r}: unparseable time {raw_time!r} ({e})",
            row_id=row_id, field="time", value=raw_time,
        ) from e

    numbers: dict[str, float] = {}
    for column, attr in _NUMERIC_COLUMNS.items():
        value = _parse_number(row.get(column))
        if strict and math.isnan(value):
            raise InvalidRecord(
                f"row {row_id!r}: {column} is not a number: {row.get(column)!r}",
                row_id=row_id, field=column, value=row.get(column),
            )
        numbers[attr] = value

    place = _as_text(row.get("place"))
    return Event(
        id=row_id,
        occurred_at=occurred_at.to_pydatetime(),
        place=place,
        short_place=extract_short_place(place),
        event_type=_as_text(row.get("type")).strip(),
        **numbers,
    )


def normalize_rows(
    rows: Iterable[Mapping[str, Any]],
    config: Optional[EngineConfig] = None,
) -> list[Event]:
    """Normalize a batch of raw rows, preserving their order.

    config.invalid_rows decides what happens to rows with unparseable numbers:
    "keep" stores NaN, "drop" skips the row, "raise" re-raises InvalidRecord.
    Rows with an unparseable time are skipped under "keep"/"drop".

    Raises:
        InvalidRecord: Only under the "raise" policy.
    """
    config = config or EngineConfig()
    strict = config.invalid_rows != "keep"
    events: list[Event] = []
    dropped = 0
    kept_invalid = 0
    for row in rows:
        try:
            event = normalize_row(row, display_tz=config.display_tz, strict=strict)
        except InvalidRecord as e:
            if config.invalid_rows == "raise":
                raise
            logger.debug(f"dropping row: {e}")
            dropped += 1
            continue
        if event.has_invalid_numbers:
            logger.debug(f"row {event.id!r} retained with NaN numeric field(s)")
            kept_invalid += 1
        events.append(event)

    if dropped:
        logger.warning(f"Dropped {dropped} row(s) that could not be normalized")
    if kept_invalid:
        logger.warning(f"Retained {kept_invalid} row(s) with unparseable numeric fields as NaN")
    logger.info(f"Normalized {len(events)} event(s)")
    return events
