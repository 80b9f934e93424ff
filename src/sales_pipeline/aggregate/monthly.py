"""Monthly series aggregation.

`aggregate_monthly` is the heart of the pipeline: it narrows the clean frame
to one supplier or item and an inclusive month range, groups what is left by
calendar month and sums the three measures. The result is sorted, rounded to
cents and immutable.

Expectations:
- Input: a clean sales frame (see `sales_pipeline.clean.transform`) or any
  container `as_sales_frame` accepts.
- Output: a list of `MonthlyAggregate`, one per month that has matching
  records; empty months are never zero-filled.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

import pandas as pd

from sales_pipeline.clean.transform import MEASURE_COLUMNS, as_sales_frame
from sales_pipeline.models import DateCursor, FilterKind, MonthlyAggregate, SeriesTotals

CENT = Decimal("0.01")


def round_half_up(value: float) -> float:
    """Round to two decimals, ties away from zero."""
    rounded = float(Decimal(repr(float(value))).quantize(CENT, rounding=ROUND_HALF_UP))
    return rounded + 0.0  # -0.0 -> 0.0


def is_range_valid(start: DateCursor, end: DateCursor) -> bool:
    """True when `end` is the same month as `start` or later."""
    return end.key >= start.key


def aggregate_monthly(
    records: Any,
    filter_kind: FilterKind | str,
    selected_value: str,
    start: DateCursor,
    end: DateCursor,
) -> list[MonthlyAggregate]:
    """Aggregate the records matching one selection into a monthly series.

    Args:
        records: Clean frame, raw frame, Dask frame or iterable of records.
        filter_kind: Field the selection applies to (`supplier` or `item`).
        selected_value: Exact, case-sensitive value to keep.
        start: First month of the range (inclusive).
        end: Last month of the range (inclusive).

    Returns:
        Aggregates sorted by `month` (``YYYY-MM``). Empty when nothing is
        selected, the record set is empty, or the range is inverted.
    """
    kind = FilterKind(filter_kind)
    if not selected_value or not is_range_valid(start, end):
        return []

    pdf = as_sales_frame(records)
    if pdf.empty:
        return []

    # Selection filter
    selected = (pdf[kind.column] == selected_value).fillna(False).astype(bool)
    matched = pdf[selected]

    # Range filter; rows without a usable year/month drop out here
    key = matched["year"] * 12 + matched["month"]
    in_range = key.between(start.key, end.key).fillna(False).astype(bool)
    matched = matched[in_range]
    if matched.empty:
        return []

    labels = [
        f"{int(y):04d}-{int(m):02d}"
        for y, m in zip(matched["year"], matched["month"])
    ]
    sums = (
        matched[list(MEASURE_COLUMNS)]
        .fillna(0.0)
        .groupby(pd.Index(labels, name="month"))
        .sum()
        .sort_index()
    )

    return [
        MonthlyAggregate(
            month=str(month),
            retail_sales=round_half_up(row["retail_sales"]),
            warehouse_sales=round_half_up(row["warehouse_sales"]),
            retail_transfers=round_half_up(row["retail_transfers"]),
        )
        for month, row in sums.iterrows()
    ]


def series_totals(series: Iterable[MonthlyAggregate]) -> SeriesTotals:
    """Sum each measure across a finalized series (the dashboard's summary)."""
    totals = {col: 0.0 for col in MEASURE_COLUMNS}
    for agg in series:
        for col in MEASURE_COLUMNS:
            totals[col] += getattr(agg, col)
    return SeriesTotals(**{col: round_half_up(v) for col, v in totals.items()})


def series_to_frame(series: Iterable[MonthlyAggregate]) -> pd.DataFrame:
    """Return the series as a DataFrame with `month` and the three measures."""
    return pd.DataFrame(
        [agg.model_dump() for agg in series],
        columns=["month", *MEASURE_COLUMNS],
    )
