"""Pydantic models used by the sales pipeline.

These models define the record schema read from the CSV, the cursors used to
bound a date range, the derived filter domain, and the monthly series handed
to the dashboard.
"""

from __future__ import annotations

import math
import numbers
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

YEAR_RANGE = (1, 9999)


class FilterKind(str, Enum):
    """Which categorical field a selection applies to."""
    SUPPLIER = "supplier"
    ITEM = "item"

    @property
    def column(self) -> str:
        """Clean-frame column holding this kind's values."""
        return "supplier" if self is FilterKind.SUPPLIER else "item_description"


def _lenient_number(value: Any) -> Any:
    """Map blank, non-numeric and NaN inputs to None; leave the rest to pydantic."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        value = float(value)
        return value if math.isfinite(value) else None
    return value


class SalesRecord(BaseModel):
    """Schema for one row of the warehouse & retail sales dataset.

    Numeric and date fields are optional: malformed source values load as
    None and are handled by the pipeline (excluded from range filtering,
    counted as 0 when summed).
    """
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)
    supplier: str | None = Field(default=None, alias="SUPPLIER")
    item_description: str | None = Field(default=None, alias="ITEM DESCRIPTION")
    year: int | None = Field(default=None, alias="YEAR")
    month: int | None = Field(default=None, alias="MONTH")
    retail_sales: float | None = Field(default=None, alias="RETAIL SALES")
    warehouse_sales: float | None = Field(default=None, alias="WAREHOUSE SALES")
    retail_transfers: float | None = Field(default=None, alias="RETAIL TRANSFERS")

    @field_validator("supplier", "item_description", mode="before")
    @classmethod
    def _blank_text_is_missing(cls, v: Any) -> Any:
        if v is None or (isinstance(v, float) and math.isnan(v)):
            return None
        v = str(v).strip()
        return v or None

    @field_validator("year", "month", mode="before")
    @classmethod
    def _integral(cls, v: Any, info: ValidationInfo) -> Any:
        v = _lenient_number(v)
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, float):
            if not v.is_integer():
                return None
            v = int(v)
        if info.field_name == "month" and isinstance(v, int) and not 1 <= v <= 12:
            return None
        low, high = YEAR_RANGE
        if info.field_name == "year" and isinstance(v, int) and not low <= v <= high:
            return None
        return v

    @field_validator("retail_sales", "warehouse_sales", "retail_transfers", mode="before")
    @classmethod
    def _measure(cls, v: Any) -> Any:
        return _lenient_number(v)


class DateCursor(BaseModel):
    """A `{year, month}` pair bounding one end of a date range.

    Cursors compare through `key` (``year * 12 + month``) so range checks are
    plain integer comparisons.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)
    year: int = Field(..., ge=YEAR_RANGE[0], le=YEAR_RANGE[1])
    month: int = Field(..., ge=1, le=12)

    @property
    def key(self) -> int:
        return self.year * 12 + self.month

    @classmethod
    def parse(cls, text: str) -> "DateCursor":
        """Build a cursor from ``YYYY-MM`` (or ``YYYY-M``) text."""
        year, sep, month = text.strip().partition("-")
        if not sep:
            raise ValueError(f"expected YYYY-MM, got {text!r}")
        return cls(year=int(year), month=int(month))

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}"


class FilterDomain(BaseModel):
    """Distinct suppliers and items (sorted) plus the observed year window."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    suppliers: tuple[str, ...] = ()
    items: tuple[str, ...] = ()
    min_year: int
    max_year: int

    @model_validator(mode="after")
    def _ordered_years(self) -> "FilterDomain":
        if self.min_year > self.max_year:
            raise ValueError("min_year must not exceed max_year")
        return self

    def values_for(self, kind: FilterKind) -> tuple[str, ...]:
        return self.suppliers if kind is FilterKind.SUPPLIER else self.items


class MonthlyAggregate(BaseModel):
    """One finalized output row: the three measures summed for a month."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    retail_sales: float = 0.0
    warehouse_sales: float = 0.0
    retail_transfers: float = 0.0


class SeriesTotals(BaseModel):
    """Sum of each measure across a whole monthly series."""
    model_config = ConfigDict(extra="forbid", frozen=True)
    retail_sales: float = 0.0
    warehouse_sales: float = 0.0
    retail_transfers: float = 0.0


class RegistrationStatus(BaseModel):
    """Per-account document kept in the `users` collection."""
    model_config = ConfigDict(extra="ignore")
    uid: str = Field(..., min_length=1)
    is_registered: bool = False
