"""Validation utilities for the Clean layer.

Converts clean frame rows into `SalesRecord` models for callers that want
typed rows (exports, the CLI) rather than a DataFrame.
"""
from __future__ import annotations

import pandas as pd
from pydantic import ValidationError

from sales_pipeline.models import SalesRecord


def validate_records(pdf: pd.DataFrame) -> tuple[list[SalesRecord], int]:
    """Validate a pandas frame of sales rows using Pydantic.

    Missing values (NaN / NA) are passed to the model as None first.

    Args:
        pdf: Pandas DataFrame, clean schema or raw CSV headers.

    Returns:
        A tuple of (list_of_validated_records, bad_count).
    """
    good: list[SalesRecord] = []
    bad = 0

    frame = pdf.astype(object).where(pdf.notna(), None)
    for rec in frame.to_dict(orient="records"):
        try:
            good.append(SalesRecord.model_validate(rec))
        except ValidationError:
            bad += 1

    return good, bad
