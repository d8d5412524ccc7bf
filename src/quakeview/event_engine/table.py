"""Tabular view of events for the data table.

Builds a pandas DataFrame from the filtered events and sorts it by a
clicked column. Sorting is stable and only reorders the table; the engine's
filtered sequence keeps its insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd

from quakeview.event_engine.models import Event

TABLE_COLUMNS = [
    "id",
    "date",
    "time",
    "latitude",
    "longitude",
    "depth",
    "magnitude",
    "place",
    "type",
]

SORT_ASC = "ASC"
SORT_DESC = "DESC"

_NUMERIC_SORT = {"latitude", "longitude", "depth", "magnitude"}
_TIME_SORT = {"date", "time"}
_TEXT_SORT = {"place", "type", "id"}


@dataclass(frozen=True)
class SortState:
    """Current table sort: a column and a direction (ASC or DESC)."""
    column: str
    direction: str = SORT_ASC


def toggle_sort(current: Optional[SortState], column: str) -> SortState:
    """Header-click rule: the same column flips direction, a new column starts ASC."""
    _check_sort_column(column)
    if current is not None and current.column == column:
        return SortState(column, SORT_DESC if current.direction == SORT_ASC else SORT_ASC)
    return SortState(column, SORT_ASC)


def _check_sort_column(column: str) -> None:
    if column not in _NUMERIC_SORT | _TIME_SORT | _TEXT_SORT:
        raise ValueError(f"Unknown sort column {column!r}")


def events_to_frame(events: Sequence[Event]) -> pd.DataFrame:
    """One row per event with display columns plus the raw `occurred_at`."""
    df = pd.DataFrame(
        {
            "id": [e.id for e in events],
            "occurred_at": [e.occurred_at for e in events],
            "latitude": [e.latitude for e in events],
            "longitude": [e.longitude for e in events],
            "depth": [e.depth for e in events],
            "magnitude": [e.magnitude for e in events],
            "place": [e.place for e in events],
            "type": [e.event_type for e in events],
        }
    )
    df["date"] = [e.occurred_at.strftime("%d-%m-%Y") for e in events]
    df["time"] = [e.occurred_at.strftime("%H:%M") for e in events]
    for col in _NUMERIC_SORT:
        df[col] = df[col].astype(float)
    return df[TABLE_COLUMNS + ["occurred_at"]]


def table_frame(events: Sequence[Event], sort: Optional[SortState] = None) -> pd.DataFrame:
    """Events as a table, optionally sorted.

    Numeric columns sort numerically (NaN last), date and time sort by the
    event timestamp, and text columns sort case-insensitively.

    Raises:
        ValueError: If the sort column or direction is unknown.
    """
    df = events_to_frame(events)
    if sort is None or not len(df):
        return df.reset_index(drop=True)
    _check_sort_column(sort.column)
    if sort.direction not in (SORT_ASC, SORT_DESC):
        raise ValueError(f"Unknown sort direction {sort.direction!r}")

    ascending = sort.direction == SORT_ASC
    if sort.column in _TIME_SORT:
        by, key = "occurred_at", None
    elif sort.column in _NUMERIC_SORT:
        by, key = sort.column, None
    else:
        by, key = sort.column, (lambda s: s.astype(str).str.lower())
    df = df.sort_values(by=by, ascending=ascending, kind="mergesort", na_position="last", key=key)
    return df.reset_index(drop=True)
