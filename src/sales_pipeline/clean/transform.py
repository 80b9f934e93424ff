"""Cleaning and normalization utilities.

This module contains transformations that are applied partition-wise using
Dask. The output schema is stable and is what every pipeline function expects:

- `supplier`, `item_description` (plus `item_code`, `item_type` when present):
  stripped text, empty → missing
- `year`, `month`: nullable integers (`Int64`); unparseable values and months
  outside 1-12 or years outside 1-9999 are missing
- `retail_sales`, `warehouse_sales`, `retail_transfers`: floats, unparseable
  values are NaN
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, cast

import numpy as np
import pandas as pd
import dask.dataframe as dd

from sales_pipeline.models import YEAR_RANGE, SalesRecord

log = logging.getLogger(__name__)

COLUMN_MAP = {
    "SUPPLIER": "supplier",
    "ITEM CODE": "item_code",
    "ITEM DESCRIPTION": "item_description",
    "ITEM TYPE": "item_type",
    "YEAR": "year",
    "MONTH": "month",
    "RETAIL SALES": "retail_sales",
    "WAREHOUSE SALES": "warehouse_sales",
    "RETAIL TRANSFERS": "retail_transfers",
}

RAW_REQUIRED_COLUMNS = (
    "SUPPLIER",
    "ITEM DESCRIPTION",
    "YEAR",
    "MONTH",
    "RETAIL SALES",
    "WAREHOUSE SALES",
    "RETAIL TRANSFERS",
)

TEXT_COLUMNS = ("supplier", "item_code", "item_description", "item_type")
MEASURE_COLUMNS = ("retail_sales", "warehouse_sales", "retail_transfers")
CLEAN_COLUMNS = (
    "supplier",
    "item_code",
    "item_description",
    "item_type",
    "year",
    "month",
    *MEASURE_COLUMNS,
)


def clean_sales_frame(pdf: pd.DataFrame) -> pd.DataFrame:
    """Normalize one pandas frame of raw sales rows.

    Accepts either the raw CSV headers or the snake_case names; columns the
    schema does not know are dropped, and required columns that are absent
    are added as missing values.

    Args:
        pdf: Pandas DataFrame (a Dask partition or a whole file).

    Returns:
        Cleaned Pandas DataFrame.
    """
    pdf = pdf.rename(columns=lambda c: COLUMN_MAP.get(str(c).strip(), str(c).strip()))
    pdf = pdf.copy()

    # -----------------------------
    # Text columns
    # -----------------------------
    for col in TEXT_COLUMNS:
        if col not in pdf.columns:
            if col in ("supplier", "item_description"):
                pdf[col] = pd.Series(pd.NA, index=pdf.index, dtype="string")
            continue
        pdf[col] = pdf[col].astype("string").str.strip().replace("", pd.NA)

    # -----------------------------
    # Year / month
    # -----------------------------
    for col in ("year", "month"):
        values = (
            pd.to_numeric(pdf[col], errors="coerce")
            if col in pdf.columns
            else pd.Series(np.nan, index=pdf.index)
        )
        values = values.astype("float64")
        valid = values.notna() & np.isfinite(values) & (values % 1 == 0)
        if col == "month":
            valid &= values.between(1, 12)
        else:
            valid &= values.between(*YEAR_RANGE)
        pdf[col] = values.where(valid).astype("Int64")

    # -----------------------------
    # Measures
    # -----------------------------
    for col in MEASURE_COLUMNS:
        values = (
            pd.to_numeric(pdf[col], errors="coerce")
            if col in pdf.columns
            else pd.Series(np.nan, index=pdf.index)
        )
        pdf[col] = values.astype("float64").replace([np.inf, -np.inf], np.nan)

    return pdf[[c for c in CLEAN_COLUMNS if c in pdf.columns]]


def clean_sales_ddf(ddf: Any) -> Any:
    """Clean a raw sales Dask DataFrame partition by partition.

    Returns:
        Transformed Dask DataFrame with the stable clean schema.
    """
    log.info("Starting clean_sales_ddf transformation")
    meta = clean_sales_frame(ddf._meta)
    return ddf.map_partitions(clean_sales_frame, meta=meta)


def as_sales_frame(records: Any) -> pd.DataFrame:
    """Coerce any supported record container into a clean pandas frame.

    Accepts a clean pandas frame (returned as-is), a raw pandas frame with the
    CSV headers, a Dask DataFrame (computed), or an iterable of `SalesRecord`
    models / mappings keyed by either header style.
    """
    if isinstance(records, pd.DataFrame):
        if set(RAW_REQUIRED_COLUMNS) & set(map(str, records.columns)):
            return clean_sales_frame(records)
        if "year" in records.columns and isinstance(records["year"].dtype, pd.Int64Dtype):
            return records
        return clean_sales_frame(records)

    dd_mod = cast(Any, dd)
    if isinstance(records, dd_mod.DataFrame):
        return clean_sales_frame(records.compute())

    rows = [
        r.model_dump() if isinstance(r, SalesRecord) else SalesRecord.model_validate(r).model_dump()
        for r in cast(Iterable[SalesRecord | Mapping[str, Any]], records)
    ]
    return clean_sales_frame(pd.DataFrame(rows, columns=list(SalesRecord.model_fields)))
