"""Data model for the event engine.

This module defines the immutable Event record, the enums naming filter,
facet and aggregation dimensions, the BinCount aggregate row and the
InvalidRecord error raised by the normalizer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class InvalidRecord(ValueError):
    """A raw row whose timestamp or numeric fields could not be parsed."""

    def __init__(self, message: str, *, row_id: Optional[str] = None, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.row_id = row_id
        self.field = field
        self.value = value


class AggregationAxis(Enum):
    """Field used for the bar chart aggregation."""
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    DEPTH = "depth"
    MAGNITUDE = "magnitude"
    PLACE = "place"

    @property
    def is_numeric(self) -> bool:
        return self is not AggregationAxis.PLACE

    @classmethod
    def parse(cls, value: "AggregationAxis | str") -> "AggregationAxis":
        """Accept an enum member or its string value ("mag" is an alias of magnitude).

        Raises:
            ValueError: If value does not name an axis.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text == "mag":
            text = "magnitude"
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown aggregation axis {value!r}") from None


class FacetDimension(Enum):
    """Categorical dimensions that have a facet value list."""
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    PLACE = "place"
    TYPE = "type"

    @classmethod
    def parse(cls, value: "FacetDimension | str") -> "FacetDimension":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown facet dimension {value!r}") from None


class FilterDimension(Enum):
    """Dimensions that can carry a filter criterion."""
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    PLACE = "place"
    MIN_MAGNITUDE = "min_magnitude"
    MIN_DEPTH = "min_depth"
    TYPE = "type"

    @classmethod
    def parse(cls, value: "FilterDimension | str") -> "FilterDimension":
        """Accept an enum member, its value, or the camelCase names used by UI code.

        Raises:
            ValueError: If value does not name a filter dimension.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        text = _FILTER_ALIASES.get(text, text).lower()
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown filter dimension {value!r}") from None


_FILTER_ALIASES = {
    "minMagnitude": "min_magnitude",
    "minDepth": "min_depth",
    "magnitude": "min_magnitude",
    "depth": "min_depth",
    "eventType": "type",
    "event_type": "type",
}


@dataclass(frozen=True)
class Event:
    """One normalized seismic record.

    `occurred_at` is timezone-aware and already expressed in the display
    calendar, so year/month/day below are the values the user filters on.
    Numeric fields may be NaN when the raw value could not be parsed.
    """
    id: str
    occurred_at: datetime
    latitude: float
    longitude: float
    depth: float
    magnitude: float
    place: str
    short_place: str
    event_type: str

    @property
    def year(self) -> str:
        return f"{self.occurred_at.year:04d}"

    @property
    def month(self) -> str:
        return f"{self.occurred_at.month:02d}"

    @property
    def day(self) -> str:
        return f"{self.occurred_at.day:02d}"

    @property
    def has_invalid_numbers(self) -> bool:
        """True if any of latitude/longitude/depth/magnitude is NaN."""
        return any(math.isnan(v) for v in (self.latitude, self.longitude, self.depth, self.magnitude))

    def facet_value(self, dimension: FacetDimension) -> str:
        if dimension is FacetDimension.PLACE:
            return self.short_place
        if dimension is FacetDimension.TYPE:
            return self.event_type
        return getattr(self, dimension.value)


@dataclass(frozen=True)
class BinCount:
    """One row of an aggregate view (a place or a histogram bin)."""
    label: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "count": self.count}
