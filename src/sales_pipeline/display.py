"""Display-state helpers shared by the dashboard and the CLI.

A render always ends in exactly one `ChartState`. Load failures, inverted
ranges, missing selections and empty results are all terminal states with
their own placeholder text, never exceptions.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from sales_pipeline.models import DateCursor, FilterKind, MonthlyAggregate

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class ChartState(str, Enum):
    LOADING = "loading"
    LOAD_ERROR = "load_error"
    INVALID_RANGE = "invalid_range"
    NOT_SELECTED = "not_selected"
    NO_DATA = "no_data"
    READY = "ready"


def resolve_chart_state(
    *,
    loaded: bool,
    error: str | None,
    range_valid: bool,
    selected_value: str,
    series: Sequence[MonthlyAggregate],
) -> ChartState:
    """Pick the state to render; earlier checks win."""
    if not loaded:
        return ChartState.LOADING
    if error:
        return ChartState.LOAD_ERROR
    if not range_valid:
        return ChartState.INVALID_RANGE
    if not selected_value:
        return ChartState.NOT_SELECTED
    if not series:
        return ChartState.NO_DATA
    return ChartState.READY


def placeholder_message(state: ChartState, filter_kind: FilterKind | str) -> str:
    """User-facing text for every non-ready state."""
    kind = FilterKind(filter_kind).value
    messages = {
        ChartState.LOADING: "Loading sales data...",
        ChartState.LOAD_ERROR: "Failed to load data",
        ChartState.INVALID_RANGE: "Invalid date range. End date must be after start date.",
        ChartState.NOT_SELECTED: f"Select a {kind} above to view sales data",
        ChartState.NO_DATA: "No data found for the selected filters",
        ChartState.READY: "",
    }
    return messages[state]


def format_date_option(cursor: DateCursor) -> str:
    """``Jan 2019`` style label for a month cursor."""
    return f"{MONTH_NAMES[cursor.month - 1]} {cursor.year}"


def should_hint_search(options: Sequence[str], limit: int) -> bool:
    """True when an option list was cut at `limit` and search would help."""
    return len(options) >= limit
