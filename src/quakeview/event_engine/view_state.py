"""View state for the event dashboard.

Provides recompute(), the pure function deriving every view from the inputs
(records, criteria, aggregation axis), and EventViewState, the container that
holds those inputs and the last derived views.

**Public API of EventViewState:**

- **set_records(events)** / **set_raw_rows(rows)**: Load a new record set (facets are rebuilt).
- **set_filter(dimension, value)** / **set_filters(mapping)** / **clear_filters()**: Change criteria.
- **set_aggregation_axis(axis)**: Change the bar chart axis.
- **filtered_records()**, **facet_values(dimension)**, **place_counts()**, **binned_counts(axis=None)**: Read views.
- **select_event(id)** / **hover_event(id)**: Selection bookkeeping for linked table/chart highlighting.
- **subscribe(callback)**: Be told, synchronously, after every committed change.

Every mutator updates one input and rederives all dependent views before
returning; readers never observe views computed from stale criteria.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import pandas as pd

from quakeview.config import EngineConfig
from quakeview.event_engine import aggregator
from quakeview.event_engine.facets import extract_facets
from quakeview.event_engine.filter_conventions import format_filter_display
from quakeview.event_engine.filter_state import FilterCriteria
from quakeview.event_engine.models import AggregationAxis, BinCount, Event, FacetDimension, FilterDimension
from quakeview.event_engine.normalizer import normalize_rows
from quakeview.event_engine.predicate import filter_events
from quakeview.event_engine.series import ChartKind, ChartPoint, ChartSettings, LineXAxis, line_points, scatter_points
from quakeview.event_engine.table import SortState, table_frame
from quakeview.utils.logging import get_logger, log_elapsed

logger = get_logger(__name__)


@dataclass(frozen=True)
class DerivedViews:
    """Everything derived from (records, criteria, axis) in one recompute.

    `criteria` and `axis` are the inputs the views were built from.
    """
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    axis: AggregationAxis = AggregationAxis.PLACE
    filtered: tuple[Event, ...] = ()
    facets: Mapping[FacetDimension, list[str]] = field(default_factory=lambda: {d: [] for d in FacetDimension})
    place_counts: tuple[BinCount, ...] = ()
    binned_counts: tuple[BinCount, ...] = ()
    # event id -> position within `filtered` (first occurrence wins)
    id_index: Mapping[str, int] = field(default_factory=dict)


def recompute(
    records: Sequence[Event],
    criteria: FilterCriteria,
    axis: AggregationAxis,
    *,
    config: Optional[EngineConfig] = None,
    facets: Optional[Mapping[FacetDimension, list[str]]] = None,
) -> DerivedViews:
    """Derive all views from scratch. O(n) in the number of records.

    Args:
        records: Full record set, in insertion order.
        criteria: Active filter criteria.
        axis: Aggregation axis for binned_counts.
        config: Bin count and label settings. Defaults to EngineConfig().
        facets: Facets already computed for `records`; computed here when None.

    Returns:
        A DerivedViews snapshot.
    """
    config = config or EngineConfig()
    filtered = tuple(filter_events(records, criteria))
    if facets is None:
        facets = extract_facets(records)
    id_index: dict[str, int] = {}
    for i, e in enumerate(filtered):
        id_index.setdefault(e.id, i)
    return DerivedViews(
        criteria=criteria,
        axis=axis,
        filtered=filtered,
        facets=facets,
        place_counts=tuple(aggregator.place_counts(filtered)),
        binned_counts=tuple(
            aggregator.binned_counts(
                filtered, axis,
                bin_count=config.bin_count,
                label_decimals=config.label_decimals,
            )
        ),
        id_index=id_index,
    )


class EventViewState:
    """Holds the record set, criteria, aggregation axis and their derived views.

    Thread safety: each mutation and its recompute run under one reentrant
    lock, and readers take the same lock, so a reader sees either the views
    before a change or after it, never a mix.
    """

    def __init__(
        self,
        records: Iterable[Event] = (),
        *,
        config: Optional[EngineConfig] = None,
        criteria: Optional[FilterCriteria] = None,
        axis: AggregationAxis | str = AggregationAxis.PLACE,
    ) -> None:
        self.config = config or EngineConfig()
        self._lock = threading.RLock()
        self._records: tuple[Event, ...] = tuple(records)
        self._criteria = criteria or FilterCriteria()
        self._axis = AggregationAxis.parse(axis)
        self._chart = ChartSettings()
        self._selected_id: Optional[str] = None
        self._hovered_id: Optional[str] = None
        self._subscribers: list[Callable[[DerivedViews], None]] = []
        self._views = recompute(self._records, self._criteria, self._axis, config=self.config)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def records(self) -> tuple[Event, ...]:
        return self._records

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def aggregation_axis(self) -> AggregationAxis:
        return self._axis

    @property
    def views(self) -> DerivedViews:
        """The current DerivedViews snapshot."""
        with self._lock:
            return self._views

    def set_records(self, records: Iterable[Event]) -> None:
        """Replace the record set; facets and all views are rebuilt."""
        with self._lock:
            self._records = tuple(records)
            logger.info(f"loaded {len(self._records)} event(s)")
            views = self._commit(records_changed=True)
        self._notify(views)

    def set_raw_rows(self, rows: Iterable[Mapping[str, Any]]) -> None:
        """Normalize raw feed rows with this state's config, then set_records()."""
        self.set_records(normalize_rows(rows, self.config))

    def set_filter(self, dimension: FilterDimension | str, value: Any) -> None:
        """Set one criterion (None or "" clears it) and rederive the views.

        Raises:
            ValueError: If dimension is not a filter dimension.
        """
        self.set_filters({dimension: value})

    def set_filters(self, values: Mapping[FilterDimension | str, Any]) -> None:
        """Set several criteria with a single recompute."""
        with self._lock:
            criteria = self._criteria
            for dimension, value in values.items():
                criteria = criteria.with_value(dimension, value)
            self._criteria = criteria
            views = self._commit()
        self._notify(views)

    def clear_filters(self) -> None:
        with self._lock:
            self._criteria = FilterCriteria()
            views = self._commit()
        self._notify(views)

    def set_aggregation_axis(self, axis: AggregationAxis | str) -> None:
        """Choose the bar chart axis.

        Raises:
            ValueError: If axis does not name an aggregation axis.
        """
        with self._lock:
            self._axis = AggregationAxis.parse(axis)
            views = self._commit()
        self._notify(views)

    def _commit(self, records_changed: bool = False) -> DerivedViews:
        """Recompute views from the current inputs. Caller holds the lock.

        Facets are reused unless the record set itself changed.
        """
        facets = None if records_changed else self._views.facets
        with log_elapsed(logger, f"recompute over {len(self._records)} event(s)"):
            self._views = recompute(
                self._records, self._criteria, self._axis,
                config=self.config, facets=facets,
            )
        logger.debug(
            f"recompute: {len(self._views.filtered)} of {len(self._records)} event(s) pass "
            f"[{format_filter_display(self._criteria.to_dict())}] axis={self._axis.value}"
        )
        return self._views

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def filtered_records(self) -> list[Event]:
        """Events passing the current criteria, in insertion order."""
        return list(self.views.filtered)

    def facet_values(self, dimension: FacetDimension | str) -> list[str]:
        """Sorted distinct values of a facet over the full record set."""
        return list(self.views.facets[FacetDimension.parse(dimension)])

    def place_counts(self) -> list[BinCount]:
        return list(self.views.place_counts)

    def binned_counts(self, axis: AggregationAxis | str | None = None) -> list[BinCount]:
        """Bar chart counts for `axis` (default: the current aggregation axis).

        The current axis is served from the last recompute; any other axis is
        computed on the spot over the current filtered events.
        """
        views = self.views
        current = views.axis
        axis = current if axis is None else AggregationAxis.parse(axis)
        if axis is current:
            return list(views.binned_counts)
        return aggregator.binned_counts(
            views.filtered, axis,
            bin_count=self.config.bin_count,
            label_decimals=self.config.label_decimals,
        )

    def find_event_in_bin(self, label: str, bin_index: Optional[int] = None) -> Optional[Event]:
        """First filtered event counted by the bar labelled `label` on the current axis.

        `bin_index` (the bar's position) disambiguates bars sharing a label.
        """
        views = self.views
        return aggregator.find_event_in_bin(
            views.filtered, views.axis, label,
            bin_index=bin_index,
            bin_count=self.config.bin_count,
            label_decimals=self.config.label_decimals,
        )

    def table(self, sort: Optional[SortState] = None) -> pd.DataFrame:
        """Filtered events as a DataFrame, optionally sorted for display."""
        return table_frame(self.views.filtered, sort)

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    @property
    def chart_settings(self) -> ChartSettings:
        return self._chart

    def set_chart_kind(self, kind: ChartKind | str) -> None:
        with self._lock:
            self._chart = self._chart.with_kind(kind)

    def set_scatter_axes(self, x: AggregationAxis | str, y: AggregationAxis | str) -> None:
        with self._lock:
            self._chart = self._chart.with_scatter_axes(x, y)

    def set_line_axes(self, x: LineXAxis, y: AggregationAxis | str) -> None:
        with self._lock:
            self._chart = self._chart.with_line_axes(x, y)

    def scatter_points(self) -> list[ChartPoint]:
        with self._lock:
            views, chart = self._views, self._chart
        return scatter_points(views.filtered, chart.scatter_x, chart.scatter_y)

    def line_points(self) -> list[ChartPoint]:
        with self._lock:
            views, chart = self._views, self._chart
        return line_points(views.filtered, chart.line_x, chart.line_y)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_event(self, event_id: Optional[str]) -> None:
        with self._lock:
            self._selected_id = event_id

    def hover_event(self, event_id: Optional[str]) -> None:
        with self._lock:
            self._hovered_id = event_id

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def hovered_id(self) -> Optional[str]:
        return self._hovered_id

    def selected_event(self) -> Optional[Event]:
        """The selected event, or None if nothing is selected or it is filtered out."""
        return self._lookup(self._selected_id)

    def hovered_event(self) -> Optional[Event]:
        return self._lookup(self._hovered_id)

    def _lookup(self, event_id: Optional[str]) -> Optional[Event]:
        if event_id is None:
            return None
        views = self.views
        i = views.id_index.get(event_id)
        return None if i is None else views.filtered[i]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[DerivedViews], None]) -> Callable[[], None]:
        """Call `callback(views)` after every committed change.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, views: DerivedViews) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(views)
