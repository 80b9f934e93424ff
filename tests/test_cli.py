from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from sales_pipeline.cli import build_parser, main


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_PATH", str(tmp_path / "logs" / "cli.log"))


def test_domain_command(sales_csv: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--csv", str(sales_csv), "domain"]) == 0
    out = capsys.readouterr().out
    assert "suppliers: 3" in out
    assert "years:     2019-2020" in out


def test_options_command_keeps_logs_off_stdout(
    sales_csv: Path, capsys: pytest.CaptureFixture[str], bare_root_logger: logging.Logger
) -> None:
    assert main(["--csv", str(sales_csv), "options", "--kind", "item", "--search", "wine"]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["Red Wine", "White Wine"]
    assert "Loaded 6 sales records" in captured.err


def test_options_limit(sales_csv: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--csv", str(sales_csv), "options", "--limit", "1"]) == 0
    assert capsys.readouterr().out.splitlines() == ["Acme"]


@pytest.mark.parametrize("limit", ["0", "-1", "many"])
def test_non_positive_limit_is_a_usage_error(sales_csv: Path, limit: str) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--csv", str(sales_csv), "options", "--limit", limit])
    assert exc.value.code == 2


def test_aggregate_command_writes_json(
    sales_csv: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out_path = tmp_path / "out" / "acme.json"
    code = main([
        "--csv", str(sales_csv), "aggregate", "--value", "Acme",
        "--start", "2019-01", "--end", "2019-12", "--output", str(out_path),
    ])
    assert code == 0
    assert "Total retail sales: 12.50" in capsys.readouterr().out
    rows = json.loads(out_path.read_text(encoding="utf-8"))
    assert [r["month"] for r in rows] == ["2019-01", "2019-02"]


def test_aggregate_invalid_range_exits_nonzero(sales_csv: Path) -> None:
    code = main([
        "--csv", str(sales_csv), "aggregate", "--value", "Acme",
        "--start", "2020-01", "--end", "2019-01",
    ])
    assert code == 1


def test_missing_csv_exits_with_error(tmp_path: Path) -> None:
    assert main(["--csv", str(tmp_path / "missing.csv"), "domain"]) == 1


def test_bad_month_argument_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["aggregate", "--value", "x", "--start", "Jan", "--end", "2019-01"])
    assert exc.value.code == 2
