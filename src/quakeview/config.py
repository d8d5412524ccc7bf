"""
Engine configuration for quakeview.

Behavior:
- Defaults reproduce the dashboard: 10 histogram bins, labels with 2 decimals,
  calendar components taken in UTC, unparseable numbers retained as NaN.
- from_dict() is tolerant: unknown keys are ignored with warnings and values
  that cannot be read fall back to defaults.
- from_env() overlays QUAKEVIEW_DISPLAY_TZ / QUAKEVIEW_INVALID_ROWS.

Nothing here is persisted to disk.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from quakeview.utils.logging import get_logger

logger = get_logger(__name__)

# Policies for rows whose numeric fields do not parse.
INVALID_ROW_POLICIES = ("keep", "drop", "raise")


def _valid_tz(tz: str) -> bool:
    try:
        pd.Timestamp("2000-01-01", tz="UTC").tz_convert(tz)
    except Exception:
        return False
    return True


@dataclass(frozen=True)
class EngineConfig:
    """
    JSON-friendly engine settings.

    - bin_count: number of equal-width histogram bins (>= 1)
    - label_decimals: decimals used in histogram bin labels (>= 0)
    - display_tz: IANA zone name used to split timestamps into year/month/day
    - invalid_rows: "keep" | "drop" | "raise" for rows with unparseable numbers
    """
    bin_count: int = 10
    label_decimals: int = 2
    display_tz: str = "UTC"
    invalid_rows: str = "keep"

    def __post_init__(self) -> None:
        if self.bin_count < 1:
            raise ValueError(f"bin_count must be >= 1, got {self.bin_count}")
        if self.label_decimals < 0:
            raise ValueError(f"label_decimals must be >= 0, got {self.label_decimals}")
        if self.invalid_rows not in INVALID_ROW_POLICIES:
            raise ValueError(f"invalid_rows must be one of {INVALID_ROW_POLICIES}, got {self.invalid_rows!r}")
        if not _valid_tz(self.display_tz):
            raise ValueError(f"Unknown display_tz {self.display_tz!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bin_count": self.bin_count,
            "label_decimals": self.label_decimals,
            "display_tz": self.display_tz,
            "invalid_rows": self.invalid_rows,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "EngineConfig":
        """
        Tolerant loader:
        - ignores unknown keys (with a warning)
        - falls back to the default for any value that is missing or invalid
        """
        defaults = cls()
        known_keys = set(defaults.to_dict())
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in engine config, ignoring")

        bin_count = defaults.bin_count
        if "bin_count" in d:
            try:
                bin_count = int(d["bin_count"])
                if bin_count < 1:
                    raise ValueError(bin_count)
            except (TypeError, ValueError):
                logger.warning(f"Invalid bin_count {d['bin_count']!r}, using {defaults.bin_count}")
                bin_count = defaults.bin_count

        label_decimals = defaults.label_decimals
        if "label_decimals" in d:
            try:
                label_decimals = int(d["label_decimals"])
                if label_decimals < 0:
                    raise ValueError(label_decimals)
            except (TypeError, ValueError):
                logger.warning(f"Invalid label_decimals {d['label_decimals']!r}, using {defaults.label_decimals}")
                label_decimals = defaults.label_decimals

        display_tz = str(d.get("display_tz", defaults.display_tz))
        if not _valid_tz(display_tz):
            logger.warning(f"Unknown display_tz {display_tz!r}, using {defaults.display_tz}")
            display_tz = defaults.display_tz

        invalid_rows = str(d.get("invalid_rows", defaults.invalid_rows)).lower()
        if invalid_rows not in INVALID_ROW_POLICIES:
            logger.warning(f"Invalid invalid_rows {invalid_rows!r}, using {defaults.invalid_rows}")
            invalid_rows = defaults.invalid_rows

        return cls(
            bin_count=bin_count,
            label_decimals=label_decimals,
            display_tz=display_tz,
            invalid_rows=invalid_rows,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Defaults overlaid with QUAKEVIEW_* environment variables."""
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        if environ.get("QUAKEVIEW_DISPLAY_TZ"):
            overrides["display_tz"] = environ["QUAKEVIEW_DISPLAY_TZ"]
        if environ.get("QUAKEVIEW_INVALID_ROWS"):
            overrides["invalid_rows"] = environ["QUAKEVIEW_INVALID_ROWS"]
        return cls.from_dict(overrides)
