"""Reading a USGS-style event CSV from disk or a buffer.

Fetching the feed over the network is left to the caller; this module only
turns already-downloaded CSV text into raw rows and Events.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from quakeview.config import EngineConfig
from quakeview.event_engine.models import Event
from quakeview.event_engine.normalizer import RAW_COLUMNS, normalize_rows
from quakeview.utils.logging import get_logger

logger = get_logger(__name__)

CsvSource = Union[str, Path, io.TextIOBase, io.BufferedIOBase]


def read_feed_csv(source: CsvSource) -> list[dict[str, str]]:
    """Read CSV rows as dicts of text, keeping only the RAW_COLUMNS.

    Every cell is read as a string and empty cells stay "" (no NaN), so the
    normalizer sees exactly what the feed contained. Blank lines are skipped.

    Raises:
        FileNotFoundError: If source is a path that does not exist.
        ValueError: If a required column is missing.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"CSV not found: {path}")
        source = path
    df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    missing = [c for c in RAW_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"feed CSV is missing required column(s): {missing}")
    logger.debug(f"read {len(df)} feed row(s)")
    return df[list(RAW_COLUMNS)].to_dict(orient="records")


def read_feed_text(text: str) -> list[dict[str, str]]:
    """read_feed_csv() for CSV already held in memory as text."""
    return read_feed_csv(io.StringIO(text))


def load_feed_csv(source: CsvSource, config: Optional[EngineConfig] = None) -> list[Event]:
    """Read and normalize a feed CSV in one step."""
    return normalize_rows(read_feed_csv(source), config)


def rows_from_frame(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Raw rows from a DataFrame that already holds the feed columns."""
    missing = [c for c in RAW_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"df is missing required column(s): {missing}")
    return df[list(RAW_COLUMNS)].to_dict(orient="records")
