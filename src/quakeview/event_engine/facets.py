"""Facet value lists for filter dropdowns.

Facets come from the full record set, never the filtered subset, so every
value stays selectable whatever else is filtered.
"""

from __future__ import annotations

from typing import Iterable

from quakeview.event_engine.models import Event, FacetDimension


def facet_values(events: Iterable[Event], dimension: FacetDimension | str) -> list[str]:
    """Sorted distinct values of one facet dimension."""
    dimension = FacetDimension.parse(dimension)
    return sorted({e.facet_value(dimension) for e in events})


def extract_facets(events: Iterable[Event]) -> dict[FacetDimension, list[str]]:
    """Sorted distinct values for every facet dimension, in one pass."""
    seen: dict[FacetDimension, set[str]] = {d: set() for d in FacetDimension}
    for e in events:
        for dimension, values in seen.items():
            values.add(e.facet_value(dimension))
    return {dimension: sorted(values) for dimension, values in seen.items()}
