"""Filter predicate evaluation.

All active criteria are ANDed. Date components are compared one by one
(so day="05" matches the 5th of every month still allowed by the other
criteria). Thresholds are inclusive lower bounds; a threshold that does
not parse as a number is ignored.
"""

from __future__ import annotations

from typing import Iterable

from quakeview.event_engine.filter_conventions import is_unset, parse_optional_float
from quakeview.event_engine.filter_state import FilterCriteria
from quakeview.event_engine.models import Event


def matches(event: Event, criteria: FilterCriteria) -> bool:
    """True if event passes every active criterion. Never raises."""
    if not is_unset(criteria.year) and event.year != criteria.year:
        return False
    if not is_unset(criteria.month) and event.month != criteria.month:
        return False
    if not is_unset(criteria.day) and event.day != criteria.day:
        return False
    if not is_unset(criteria.place) and event.short_place != criteria.place:
        return False
    if not is_unset(criteria.event_type) and event.event_type != criteria.event_type:
        return False

    min_mag = parse_optional_float(criteria.min_magnitude)
    # NaN magnitudes fail any active threshold (comparison is False)
    if min_mag is not None and not event.magnitude >= min_mag:
        return False
    min_depth = parse_optional_float(criteria.min_depth)
    if min_depth is not None and not event.depth >= min_depth:
        return False
    return True


def filter_events(events: Iterable[Event], criteria: FilterCriteria) -> list[Event]:
    """Stable filter: the events passing criteria, in their original order."""
    return [e for e in events if matches(e, criteria)]
