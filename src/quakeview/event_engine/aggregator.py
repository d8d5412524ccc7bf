"""
Aggregations over the filtered events - pandas/numpy.

Two views feed the bar chart:

  1. Place counts: events grouped by short place, one row per place present
     in the input (zero-count places never appear), ordered by place name.
  2. Binned counts: equal-width histogram of one numeric axis. [min, max] of
     the input is split into `bin_count` bins of width (max - min) / bin_count;
     value v goes to bin floor((v - min) / width), clamped so max lands in the
     last bin. Every bin is emitted, empty ones included, labelled by its
     lower edge. All values equal -> a single bin labelled min.

Non-finite axis values (NaN from unparseable fields) are left out of the
histogram but still count toward place counts.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from quakeview.event_engine.models import AggregationAxis, BinCount, Event

DEFAULT_BIN_COUNT = 10
DEFAULT_LABEL_DECIMALS = 2


# -----------------------------------------------------------------------------
# Place counts
# -----------------------------------------------------------------------------


def place_counts(events: Sequence[Event]) -> list[BinCount]:
    """Count events per short place, ordered by place name."""
    if not events:
        return []
    places = pd.Series([e.short_place for e in events], dtype=object)
    counts = places.value_counts(sort=False).sort_index()
    return [BinCount(label=str(place), count=int(n)) for place, n in counts.items()]


# -----------------------------------------------------------------------------
# Histogram binning
# -----------------------------------------------------------------------------


def axis_values(events: Sequence[Event], axis: AggregationAxis | str) -> pd.Series:
    """Numeric values of events on a numeric axis (NaN where unparseable).

    Raises:
        ValueError: If axis is the categorical PLACE axis.
    """
    axis = AggregationAxis.parse(axis)
    if not axis.is_numeric:
        raise ValueError("axis_values() needs a numeric axis, got 'place'")
    return pd.to_numeric(pd.Series([getattr(e, axis.value) for e in events], dtype=float), errors="coerce")


def format_bin_label(edge: float, label_decimals: int = DEFAULT_LABEL_DECIMALS) -> str:
    return f"{edge:.{label_decimals}f}"


def assign_bins(values: np.ndarray, vmin: float, bin_size: float, bin_count: int) -> np.ndarray:
    """Bin index of each value; bin_size 0 puts everything in bin 0."""
    if bin_size == 0:
        return np.zeros(len(values), dtype=int)
    idx = np.floor((values - vmin) / bin_size).astype(int)
    return np.clip(idx, 0, bin_count - 1)


def _histogram(
    values: np.ndarray,
    bin_count: int,
    label_decimals: int,
) -> tuple[list[str], np.ndarray]:
    """Labels and per-value bin indices for the finite values given."""
    vmin = float(np.min(values))
    vmax = float(np.max(values))
    if vmin == vmax:
        return [format_bin_label(vmin, label_decimals)], np.zeros(len(values), dtype=int)
    bin_size = (vmax - vmin) / bin_count
    labels = [format_bin_label(vmin + i * bin_size, label_decimals) for i in range(bin_count)]
    return labels, assign_bins(values, vmin, bin_size, bin_count)


def binned_counts(
    events: Sequence[Event],
    axis: AggregationAxis | str,
    *,
    bin_count: int = DEFAULT_BIN_COUNT,
    label_decimals: int = DEFAULT_LABEL_DECIMALS,
) -> list[BinCount]:
    """Equal-width histogram counts of events on an axis.

    For the PLACE axis this is place_counts(events).

    Returns:
        bin_count rows for a non-empty input, one row when all values are
        equal, and an empty list when no event has a finite value.
    """
    axis = AggregationAxis.parse(axis)
    if axis is AggregationAxis.PLACE:
        return place_counts(events)
    values = axis_values(events, axis).to_numpy(dtype=float)
    values = values[np.isfinite(values)]
    if values.size == 0:
        return []
    labels, idx = _histogram(values, bin_count, label_decimals)
    counts = np.bincount(idx, minlength=len(labels))
    return [BinCount(label=label, count=int(n)) for label, n in zip(labels, counts)]


def find_event_in_bin(
    events: Sequence[Event],
    axis: AggregationAxis | str,
    label: str,
    *,
    bin_index: Optional[int] = None,
    bin_count: int = DEFAULT_BIN_COUNT,
    label_decimals: int = DEFAULT_LABEL_DECIMALS,
) -> Optional[Event]:
    """First event (in input order) that falls in the bar labelled `label`.

    Uses the same bin assignment as binned_counts(), so clicking a bar
    selects one of the events it counts. Returns None if no event matches.

    Over a narrow range several bins can share a rounded label (1.000 and
    1.009 give six "1.00" bars). Pass `bin_index`, the bar's position in
    binned_counts(), to pick one of them; without it the first bin carrying
    `label` is used. `bin_index` is ignored on the place axis.
    """
    axis = AggregationAxis.parse(axis)
    if axis is AggregationAxis.PLACE:
        return next((e for e in events if e.short_place == label), None)

    all_values = axis_values(events, axis).to_numpy(dtype=float)
    finite = np.isfinite(all_values)
    if not finite.any():
        return None
    labels, idx = _histogram(all_values[finite], bin_count, label_decimals)
    if bin_index is None:
        if label not in labels:
            return None
        target = labels.index(label)
    else:
        if not 0 <= bin_index < len(labels) or labels[bin_index] != label:
            return None
        target = bin_index
    candidates = [e for e, ok in zip(events, finite) if ok]
    for event, i in zip(candidates, idx):
        if i == target:
            return event
    return None
