"""Unit tests for chart settings and point series."""

import pytest

from quakeview.event_engine.models import AggregationAxis
from quakeview.event_engine.normalizer import normalize_row
from quakeview.event_engine.series import (
    LINE_TIME,
    ChartKind,
    ChartPoint,
    ChartSettings,
    line_points,
    scatter_points,
)


def test_chart_settings_defaults():
    s = ChartSettings()
    assert s.kind is ChartKind.SCATTER
    assert (s.scatter_x, s.scatter_y) == (AggregationAxis.LONGITUDE, AggregationAxis.LATITUDE)
    assert (s.line_x, s.line_y) == (LINE_TIME, AggregationAxis.MAGNITUDE)


def test_chart_settings_updates_return_copies():
    s = ChartSettings()
    s2 = s.with_kind("bar").with_scatter_axes("depth", "mag").with_line_axes("latitude", "depth")
    assert s.kind is ChartKind.SCATTER
    assert s2.kind is ChartKind.BAR
    assert (s2.scatter_x, s2.scatter_y) == (AggregationAxis.DEPTH, AggregationAxis.MAGNITUDE)
    assert (s2.line_x, s2.line_y) == (AggregationAxis.LATITUDE, AggregationAxis.DEPTH)


def test_chart_settings_reject_categorical_axes():
    with pytest.raises(ValueError):
        ChartSettings().with_scatter_axes("place", "depth")
    with pytest.raises(ValueError):
        ChartSettings().with_line_axes("time", "time")
    with pytest.raises(ValueError):
        ChartSettings().with_kind("pie")


def test_scatter_points(scenario_events):
    points = scatter_points(scenario_events, "longitude", "latitude")
    assert points[0] == ChartPoint("A", -119.8, 39.5)
    assert [p.id for p in points] == ["A", "B", "C"]
    assert points[1].to_dict() == {"id": "B", "x": 2.3, "y": 48.8}


def test_scatter_points_skip_nan(row_factory):
    events = [normalize_row(row_factory("x", depth="")), normalize_row(row_factory("y"))]
    assert [p.id for p in scatter_points(events, "depth", "mag")] == ["y"]


def test_line_points_time_axis_sorted_by_time(scenario_events):
    points = line_points(scenario_events, "time", "mag")
    assert [p.id for p in points] == ["C", "A", "B"]
    c = next(e for e in scenario_events if e.id == "C")
    assert points[0].x == pytest.approx(c.occurred_at.timestamp() * 1000.0)
    assert points[0].y == pytest.approx(6.5)


def test_line_points_numeric_axis_keeps_order(scenario_events):
    assert [p.id for p in line_points(scenario_events, "depth", "mag")] == ["A", "B", "C"]
