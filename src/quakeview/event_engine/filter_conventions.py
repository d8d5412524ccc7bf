"""Filter conventions for the event engine.

Single source of truth for the "no constraint" sentinel and the rules for
reading criterion values, so FilterCriteria, the predicate engine and UI
code agree on what an inactive filter looks like.
"""

from __future__ import annotations

import math
from typing import Any, Optional

# Sentinel value meaning "no constraint" for a filter dimension.
# Used in: UI dropdown "All ..." options, FilterCriteria fields, predicate.matches().
FILTER_NONE = ""


def is_unset(value: Any) -> bool:
    """True if a criterion value means "no constraint" (None, or blank text)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == FILTER_NONE
    return False


def normalize_criterion(value: Any) -> str:
    """Canonical text for a categorical criterion; FILTER_NONE when unset."""
    if is_unset(value):
        return FILTER_NONE
    return str(value).strip()


def parse_optional_float(value: Any) -> Optional[float]:
    """Parse a numeric threshold, returning None for "no constraint".

    Unset values, text that is not a number, and NaN all yield None, so an
    invalid threshold never filters anything out.

    Args:
        value: Threshold as typed by the user (str), or a number.

    Returns:
        The threshold as float, or None.
    """
    if is_unset(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def is_filtered(selections: dict[str, object]) -> bool:
    """True if any selection applies a constraint."""
    return any(not is_unset(v) for v in selections.values())


def format_filter_display(selections: dict[str, object]) -> str:
    """Short label for chart titles / tooltips: active filters or 'All'."""
    if not is_filtered(selections):
        return "All"
    parts = [f"{k}={v}" for k, v in selections.items() if not is_unset(v)]
    return ", ".join(parts)
