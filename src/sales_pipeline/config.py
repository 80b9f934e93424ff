"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads environment variables (with `.env` at the project root loaded first) and
validates the numeric ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

from sales_pipeline.models import YEAR_RANGE

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_CSV_PATH = "data/Warehouse_and_Retail_Sales.csv"


@dataclass(frozen=True)
class Settings:
    """Container for pipeline configuration read from the environment.

    Attributes:
        sales_csv_path: Location of the warehouse & retail sales CSV.
        mongo_uri: MongoDB connection URI for the account document store.
        mongo_db: Target MongoDB database name.
        option_limit: Maximum number of filter options offered to the UI.
        fallback_min_year: First year of the range window used when no record
            carries a parseable year.
        fallback_max_year: Last year of that fallback window.
        csv_blocksize: Dask blocksize used when reading the CSV.
        log_path: File the CLI writes its log to.
    """
    sales_csv_path: Path
    mongo_uri: str
    mongo_db: str
    option_limit: int
    fallback_min_year: int
    fallback_max_year: int
    csv_blocksize: str
    log_path: Path


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from None


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a numeric variable is not an integer, if
            `OPTION_LIMIT` is not positive, or if the fallback year window is
            inverted or outside the supported years.
    """
    sales_csv_path = Path(os.getenv("SALES_CSV_PATH", DEFAULT_CSV_PATH))
    mongo_uri = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db = os.getenv("MONGO_DB", "sales")
    option_limit = _int_env("OPTION_LIMIT", 100)
    fallback_min_year = _int_env("FALLBACK_MIN_YEAR", 2020)
    fallback_max_year = _int_env("FALLBACK_MAX_YEAR", 2024)
    csv_blocksize = os.getenv("CSV_BLOCKSIZE", "64MB").strip() or "64MB"
    log_path = Path(os.getenv("LOG_PATH", "logs/pipeline.log"))

    if option_limit <= 0:
        raise RuntimeError("OPTION_LIMIT must be a positive integer.")
    if fallback_min_year > fallback_max_year:
        raise RuntimeError(
            "FALLBACK_MIN_YEAR must not be greater than FALLBACK_MAX_YEAR."
        )
    if fallback_min_year < YEAR_RANGE[0] or fallback_max_year > YEAR_RANGE[1]:
        raise RuntimeError(
            f"Fallback years must lie within {YEAR_RANGE[0]}-{YEAR_RANGE[1]}."
        )

    return Settings(
        sales_csv_path=sales_csv_path,
        mongo_uri=mongo_uri,
        mongo_db=mongo_db,
        option_limit=option_limit,
        fallback_min_year=fallback_min_year,
        fallback_max_year=fallback_max_year,
        csv_blocksize=csv_blocksize,
        log_path=log_path,
    )
