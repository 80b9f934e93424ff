"""Shared fixtures: a small sales CSV and matching in-memory rows.

The CSV mixes well-formed rows with the usual dataset defects (a blank line,
a non-numeric measure, a missing year) so loading and aggregation tests see
the same edge cases the real file has.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator

import pytest

SALES_CSV = """YEAR,MONTH,SUPPLIER,ITEM CODE,ITEM DESCRIPTION,ITEM TYPE,RETAIL SALES,RETAIL TRANSFERS,WAREHOUSE SALES
2019,1,Acme,100,Red Wine,WINE,10,0,5
2019,1,Acme,101,White Wine,WINE,2.5,1,0
2019,2,Acme,100,Red Wine,WINE,N/A,2,3

2019,3,Beta,200,Lager,BEER,4,0,-1
2020,1,Ajax,300,Red Wine,WINE,1.005,0,0
,5,Acme,100,Red Wine,WINE,7,0,0
"""


@pytest.fixture
def sales_csv(tmp_path: Path) -> Path:
    path = tmp_path / "sales.csv"
    path.write_text(SALES_CSV, encoding="utf-8")
    return path


@pytest.fixture
def acme_rows() -> list[dict[str, Any]]:
    return [
        {
            "supplier": "Acme",
            "year": 2019,
            "month": 1,
            "retail_sales": "10",
            "warehouse_sales": "5",
            "retail_transfers": "0",
        },
        {
            "supplier": "Acme",
            "year": 2019,
            "month": 1,
            "retail_sales": "2.5",
            "warehouse_sales": "0",
            "retail_transfers": "1",
        },
    ]


@pytest.fixture
def bare_root_logger() -> Iterator[logging.Logger]:
    """Root logger with no handlers, so `configure_logging` installs its own.

    pytest attaches capture handlers to the root logger, which would make
    `logging.basicConfig` a no-op; they are restored afterwards.
    """
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    for h in saved_handlers:
        root.removeHandler(h)
    try:
        yield root
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
