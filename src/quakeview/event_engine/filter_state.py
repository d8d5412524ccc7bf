"""Filter criteria state for the event engine.

This module defines the FilterCriteria dataclass holding the active filter
values, one per FilterDimension, and its dict (de)serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from quakeview.event_engine.filter_conventions import FILTER_NONE, is_unset, normalize_criterion
from quakeview.event_engine.models import FilterDimension

# FilterDimension -> dataclass attribute
_FIELD_FOR_DIMENSION = {
    FilterDimension.YEAR: "year",
    FilterDimension.MONTH: "month",
    FilterDimension.DAY: "day",
    FilterDimension.PLACE: "place",
    FilterDimension.MIN_MAGNITUDE: "min_magnitude",
    FilterDimension.MIN_DEPTH: "min_depth",
    FilterDimension.TYPE: "event_type",
}

# zero-pad width for numeric date components
_DATE_WIDTH = {
    FilterDimension.YEAR: 4,
    FilterDimension.MONTH: 2,
    FilterDimension.DAY: 2,
}


def _canonical(dimension: FilterDimension, value: Any) -> str:
    text = normalize_criterion(value)
    width = _DATE_WIDTH.get(dimension)
    if width and text.isdigit():
        text = text.zfill(width)
    return text


@dataclass(frozen=True)
class FilterCriteria:
    """Active filter values (immutable; use with_value() to change one).

    Every field holds text; FILTER_NONE ("") means no constraint on that
    dimension. Thresholds keep the user's text and are parsed at match time
    (see filter_conventions.parse_optional_float).
    """
    year: str = FILTER_NONE
    month: str = FILTER_NONE
    day: str = FILTER_NONE
    place: str = FILTER_NONE          # exact match against Event.short_place
    min_magnitude: str = FILTER_NONE  # inclusive lower bound
    min_depth: str = FILTER_NONE      # inclusive lower bound
    event_type: str = FILTER_NONE

    def __post_init__(self) -> None:
        for dimension, attr in _FIELD_FOR_DIMENSION.items():
            object.__setattr__(self, attr, _canonical(dimension, getattr(self, attr)))

    def get(self, dimension: FilterDimension | str) -> str:
        """Current value for a dimension (FILTER_NONE when inactive)."""
        dimension = FilterDimension.parse(dimension)
        return getattr(self, _FIELD_FOR_DIMENSION[dimension])

    def with_value(self, dimension: FilterDimension | str, value: Any) -> "FilterCriteria":
        """Return a copy with one dimension changed; None or "" clears it."""
        dimension = FilterDimension.parse(dimension)
        return replace(self, **{_FIELD_FOR_DIMENSION[dimension]: _canonical(dimension, value)})

    def active(self) -> dict[str, str]:
        """Map dimension name -> value for the constrained dimensions only."""
        return {k: v for k, v in self.to_dict().items() if not is_unset(v)}

    def to_dict(self) -> dict[str, str]:
        """Serialize to a dict keyed by FilterDimension value."""
        return {dimension.value: getattr(self, attr) for dimension, attr in _FIELD_FOR_DIMENSION.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterCriteria":
        """Build criteria from a dict keyed by dimension names.

        Keys may be FilterDimension values or their aliases (e.g. "minMagnitude").

        Raises:
            ValueError: If a key does not name a filter dimension.
        """
        kwargs: dict[str, str] = {}
        for key, value in data.items():
            dimension = FilterDimension.parse(key)
            kwargs[_FIELD_FOR_DIMENSION[dimension]] = value
        return cls(**kwargs)
