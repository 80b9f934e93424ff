"""sales_pipeline package.

Contains modules for loading the warehouse & retail sales CSV, cleaning it to a
stable schema, deriving filter domains, aggregating a selected supplier or item
into a monthly series, and utilities for serving a Streamlit dashboard.

Architecture:
- CSV → Clean frame (Dask, materialized to pandas) → monthly series
- Pydantic models describe records, cursors and aggregates
- A MongoDB `users` collection holds the per-account registration flag
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
