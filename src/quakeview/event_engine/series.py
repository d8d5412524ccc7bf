"""Point series for the scatter and line charts.

ChartSettings records which chart is shown and which fields go on its axes;
scatter_points() and line_points() turn the filtered events into (x, y)
points carrying the event id, so a clicked point can be mapped back to its
event. The bar chart reads the aggregates in aggregator.py instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Sequence, Union

from quakeview.event_engine.models import AggregationAxis, Event

# x axis of the line chart may be the event time instead of a numeric field
LINE_TIME = "time"


class ChartKind(Enum):
    SCATTER = "scatter"
    LINE = "line"
    BAR = "bar"


LineXAxis = Union[AggregationAxis, str]


def _numeric_axis(value: AggregationAxis | str) -> AggregationAxis:
    axis = AggregationAxis.parse(value)
    if not axis.is_numeric:
        raise ValueError(f"{axis.value!r} is not a numeric axis")
    return axis


def _line_x_axis(value: LineXAxis) -> LineXAxis:
    if isinstance(value, str) and value.strip().lower() == LINE_TIME:
        return LINE_TIME
    return _numeric_axis(value)


@dataclass(frozen=True)
class ChartSettings:
    """Which chart is shown and its axes."""
    kind: ChartKind = ChartKind.SCATTER
    scatter_x: AggregationAxis = AggregationAxis.LONGITUDE
    scatter_y: AggregationAxis = AggregationAxis.LATITUDE
    line_x: LineXAxis = LINE_TIME
    line_y: AggregationAxis = AggregationAxis.MAGNITUDE

    def with_kind(self, kind: ChartKind | str) -> "ChartSettings":
        return replace(self, kind=ChartKind(kind))

    def with_scatter_axes(self, x: AggregationAxis | str, y: AggregationAxis | str) -> "ChartSettings":
        return replace(self, scatter_x=_numeric_axis(x), scatter_y=_numeric_axis(y))

    def with_line_axes(self, x: LineXAxis, y: AggregationAxis | str) -> "ChartSettings":
        return replace(self, line_x=_line_x_axis(x), line_y=_numeric_axis(y))


@dataclass(frozen=True)
class ChartPoint:
    id: str
    x: float
    y: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y}


def _epoch_ms(event: Event) -> float:
    return event.occurred_at.timestamp() * 1000.0


def scatter_points(
    events: Sequence[Event],
    x: AggregationAxis | str,
    y: AggregationAxis | str,
) -> list[ChartPoint]:
    """Points for a scatter chart; events with a NaN coordinate are skipped."""
    x_axis, y_axis = _numeric_axis(x), _numeric_axis(y)
    points = []
    for e in events:
        xv, yv = getattr(e, x_axis.value), getattr(e, y_axis.value)
        if math.isfinite(xv) and math.isfinite(yv):
            points.append(ChartPoint(e.id, xv, yv))
    return points


def line_points(events: Sequence[Event], x: LineXAxis, y: AggregationAxis | str) -> list[ChartPoint]:
    """Points for a line chart.

    With x == "time" the points are ordered by event time and x is epoch
    milliseconds; otherwise the filtered order is kept.
    """
    x_axis, y_axis = _line_x_axis(x), _numeric_axis(y)
    if x_axis == LINE_TIME:
        ordered = sorted(events, key=lambda e: e.occurred_at)
        return [
            ChartPoint(e.id, _epoch_ms(e), getattr(e, y_axis.value))
            for e in ordered
            if math.isfinite(getattr(e, y_axis.value))
        ]
    return scatter_points(events, x_axis, y_axis)
