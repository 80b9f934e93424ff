"""Filter domain derivation.

Functions in this module describe what a caller can select: the sorted,
deduplicated supplier and item lists, a capped and searchable view of them,
and the month cursors spanning the observed years.
"""
from __future__ import annotations

from typing import Any

import pandas as pd

from sales_pipeline.clean.transform import as_sales_frame
from sales_pipeline.models import DateCursor, FilterDomain, FilterKind

DEFAULT_YEAR_WINDOW = (2020, 2024)
OPTION_LIMIT = 100


def _distinct(pdf: pd.DataFrame, column: str) -> tuple[str, ...]:
    values = pdf[column].dropna().astype(str)
    return tuple(sorted(set(values[values != ""])))


def derive_filter_domain(
    records: Any,
    fallback: tuple[int, int] = DEFAULT_YEAR_WINDOW,
) -> FilterDomain:
    """Return distinct suppliers and items plus the observed year bounds.

    Args:
        records: Clean frame, raw frame, Dask frame or iterable of records.
        fallback: `(min_year, max_year)` used when no record has a parseable
            year (including an empty record set).

    Returns:
        `FilterDomain` with lexicographically sorted text tuples.
    """
    pdf = as_sales_frame(records)
    years = pdf["year"].dropna()

    if years.empty:
        min_year, max_year = fallback
    else:
        min_year, max_year = int(years.min()), int(years.max())

    return FilterDomain(
        suppliers=_distinct(pdf, "supplier"),
        items=_distinct(pdf, "item_description"),
        min_year=min_year,
        max_year=max_year,
    )


def filter_options(
    domain: FilterDomain,
    filter_kind: FilterKind | str,
    search_term: str = "",
    limit: int = OPTION_LIMIT,
) -> list[str]:
    """Return the selectable values for `filter_kind`, capped at `limit`.

    An empty `search_term` yields the first `limit` values; otherwise values
    containing the term (case-insensitive substring) in domain order.

    Raises:
        ValueError: if `limit` is not a positive integer.
    """
    if limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit}")

    values = domain.values_for(FilterKind(filter_kind))
    if not search_term:
        return list(values[:limit])

    needle = search_term.lower()
    out: list[str] = []
    for v in values:
        if len(out) >= limit:
            break
        if needle in v.lower():
            out.append(v)
    return out


def generate_date_options(domain: FilterDomain) -> list[DateCursor]:
    """Every month of every year in the domain window, chronologically."""
    return [
        DateCursor(year=y, month=m)
        for y in range(domain.min_year, domain.max_year + 1)
        for m in range(1, 13)
    ]
