"""Unit tests for the filter predicate engine."""

import pytest

from quakeview.event_engine.filter_state import FilterCriteria
from quakeview.event_engine.normalizer import normalize_row
from quakeview.event_engine.predicate import filter_events, matches


def ids(events):
    return [e.id for e in events]


def test_no_criteria_matches_everything(scenario_events):
    assert ids(filter_events(scenario_events, FilterCriteria())) == ["A", "B", "C"]


@pytest.mark.parametrize(
    "criteria, expected",
    [
        (FilterCriteria(year="2024"), ["A", "B"]),
        (FilterCriteria(year="2023"), ["C"]),
        (FilterCriteria(month="03"), ["A", "C"]),
        (FilterCriteria(month="3"), ["A", "C"]),
        (FilterCriteria(place="Nevada"), ["A", "C"]),
        (FilterCriteria(place="France"), ["B"]),
        (FilterCriteria(event_type="quarry blast"), ["C"]),
        (FilterCriteria(event_type="explosion"), []),
    ],
)
def test_exact_match_dimensions(scenario_events, criteria, expected):
    assert ids(filter_events(scenario_events, criteria)) == expected


def test_day_matches_across_months_and_years(scenario_events):
    """day=05 matches the 5th of March and of April."""
    assert ids(filter_events(scenario_events, FilterCriteria(day="05"))) == ["A", "B"]


def test_place_matches_short_place_not_full_text(scenario_events):
    assert ids(filter_events(scenario_events, FilterCriteria(place="10 km N of Reno, Nevada"))) == []


def test_min_magnitude_is_inclusive(scenario_events):
    assert ids(filter_events(scenario_events, FilterCriteria(min_magnitude="5.0"))) == ["A", "C"]
    assert ids(filter_events(scenario_events, FilterCriteria(min_magnitude="5.01"))) == ["C"]


def test_min_depth_is_inclusive(scenario_events):
    assert ids(filter_events(scenario_events, FilterCriteria(min_depth="10"))) == ["A", "B"]


@pytest.mark.parametrize("threshold", ["abc", "nan", "1..2", " "])
def test_unparseable_threshold_is_no_constraint(scenario_events, threshold):
    c = FilterCriteria(min_magnitude=threshold, min_depth=threshold)
    assert ids(filter_events(scenario_events, c)) == ["A", "B", "C"]


def test_criteria_combine_with_and(scenario_events):
    c = FilterCriteria(place="Nevada", min_magnitude="3", event_type="earthquake")
    assert ids(filter_events(scenario_events, c)) == ["A"]


def test_adding_constraints_never_grows_the_result(scenario_events):
    c1 = FilterCriteria(min_magnitude="3.0")
    c2 = c1.with_value("type", "quarry blast")
    c3 = c2.with_value("year", "2024")
    r1 = set(ids(filter_events(scenario_events, c1)))
    r2 = set(ids(filter_events(scenario_events, c2)))
    r3 = set(ids(filter_events(scenario_events, c3)))
    assert r3 <= r2 <= r1


def test_nan_values_fail_active_thresholds_only(row_factory):
    e = normalize_row(row_factory("x", mag="", depth=""))
    assert matches(e, FilterCriteria()) is True
    assert matches(e, FilterCriteria(min_magnitude="0")) is False
    assert matches(e, FilterCriteria(min_depth="-100")) is False


def test_negative_depth_threshold(row_factory):
    e = normalize_row(row_factory("x", depth="-2"))
    assert matches(e, FilterCriteria(min_depth="-2")) is True
    assert matches(e, FilterCriteria(min_depth="-1.5")) is False


def test_filter_preserves_insertion_order(row_factory):
    events = [normalize_row(row_factory(str(i), mag=str(m))) for i, m in enumerate([4, 1, 5, 3, 6])]
    assert ids(filter_events(events, FilterCriteria(min_magnitude="3"))) == ["0", "2", "3", "4"]


def test_filter_is_idempotent(scenario_events):
    c = FilterCriteria(min_magnitude="3.0")
    first = filter_events(scenario_events, c)
    second = filter_events(scenario_events, c.with_value("min_magnitude", "3.0"))
    assert first == second
