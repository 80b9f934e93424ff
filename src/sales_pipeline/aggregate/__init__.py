"""Sales aggregation helpers.

This package turns the clean sales frame into what the dashboard shows: the
filter domain (distinct suppliers and items, the year window, option lists and
month cursors) and the monthly series for one selected supplier or item.
"""

from sales_pipeline.aggregate.domain import (
    derive_filter_domain,
    filter_options,
    generate_date_options,
)
from sales_pipeline.aggregate.monthly import (
    aggregate_monthly,
    is_range_valid,
    series_to_frame,
    series_totals,
)

__all__ = [
    "aggregate_monthly",
    "derive_filter_domain",
    "filter_options",
    "generate_date_options",
    "is_range_valid",
    "series_to_frame",
    "series_totals",
]
