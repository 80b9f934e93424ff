"""CSV loading for the sales dataset.

`read_sales_csv` returns a lazy Dask DataFrame straight from the file;
`load_sales` runs read → clean → compute and returns the pandas frame every
pipeline function works on. Any failure on the way is raised as
`DataLoadError` so callers can show a single blocking error state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

import pandas as pd
import dask.dataframe as dd

from sales_pipeline.clean.transform import RAW_REQUIRED_COLUMNS, clean_sales_ddf

log = logging.getLogger(__name__)


class DataLoadError(RuntimeError):
    """The sales CSV could not be fetched or parsed."""


def read_sales_csv(path: Path, blocksize: str | int = "64MB") -> Any:
    """Read the raw sales CSV into a Dask DataFrame.

    Args:
        path: Location of the CSV file.
        blocksize: Dask partition size passed to `read_csv`.

    Returns:
        Dask DataFrame with the file's header columns (whitespace stripped),
        every value read as text, blank lines skipped.

    Raises:
        DataLoadError: if the file is missing or unreadable, or its header
            lacks one of the required columns.
    """
    if not path.is_file():
        raise DataLoadError(f"Sales CSV not found: {path}")

    dd_mod = cast(Any, dd)
    try:
        ddf = dd_mod.read_csv(
            str(path),
            dtype=str,
            blocksize=blocksize,
            skip_blank_lines=True,
            keep_default_na=False,
            encoding="utf-8-sig",
        )
    except (OSError, ValueError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise DataLoadError(f"Failed to read {path}: {e}") from e

    ddf = ddf.rename(columns={c: c.strip() for c in ddf.columns})
    missing = [c for c in RAW_REQUIRED_COLUMNS if c not in ddf.columns]
    if missing:
        raise DataLoadError(
            f"{path.name} is missing required columns: {', '.join(missing)}"
        )

    log.info("Opened %s (%d partitions)", path, ddf.npartitions)
    return ddf


def load_sales(path: Path, blocksize: str | int = "64MB") -> pd.DataFrame:
    """Load, clean and materialize the sales dataset.

    Returns:
        pandas DataFrame with the clean schema documented in
        `sales_pipeline.clean.transform`.

    Raises:
        DataLoadError: on any read or parse failure. No partial data is
            returned.
    """
    ddf = clean_sales_ddf(read_sales_csv(path, blocksize))
    try:
        pdf = ddf.compute()
    except (OSError, ValueError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise DataLoadError(f"Failed to parse {path}: {e}") from e

    pdf = pdf.reset_index(drop=True)
    log.info("Loaded %d sales records from %s", len(pdf), path)
    return pdf
