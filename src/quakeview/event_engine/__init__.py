"""Filtering and aggregation engine for seismic event feeds."""

from quakeview.event_engine.filter_state import FilterCriteria
from quakeview.event_engine.models import (
    AggregationAxis,
    BinCount,
    Event,
    FacetDimension,
    FilterDimension,
    InvalidRecord,
)
from quakeview.event_engine.normalizer import normalize_row, normalize_rows
from quakeview.event_engine.view_state import DerivedViews, EventViewState, recompute

__all__ = [
    "AggregationAxis",
    "BinCount",
    "DerivedViews",
    "Event",
    "EventViewState",
    "FacetDimension",
    "FilterCriteria",
    "FilterDimension",
    "InvalidRecord",
    "normalize_row",
    "normalize_rows",
    "recompute",
]
