"""
quakeview: reactive filtering and aggregation of seismic event feeds.

This package provides:
- Event normalization from USGS-style feed rows
- FilterCriteria and a conjunctive predicate engine
- Facet value lists, place counts and equal-width histogram counts
- EventViewState: the container a dashboard reads its derived views from
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from quakeview.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the parent application's
configuration.
"""

import logging

from quakeview.utils.logging import configure_logging, get_logger

from quakeview.config import EngineConfig
from quakeview.event_engine import (
    AggregationAxis,
    BinCount,
    Event,
    EventViewState,
    FacetDimension,
    FilterCriteria,
    FilterDimension,
    InvalidRecord,
)

# NullHandler so quakeview logs don't reach root when no application has
# configured logging. Scripts call configure_logging() to add a real handler.
_logger = logging.getLogger("quakeview")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "AggregationAxis",
    "BinCount",
    "EngineConfig",
    "Event",
    "EventViewState",
    "FacetDimension",
    "FilterCriteria",
    "FilterDimension",
    "InvalidRecord",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
