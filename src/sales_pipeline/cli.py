"""Command-line interface for the sales pipeline.

Provides subcommands: `domain`, `options`, `aggregate`, and `registration`.
Each command is implemented as a `cmd_*` function that accepts an argparse
namespace and the loaded settings.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Sequence

from dotenv import load_dotenv
import pandas as pd

from sales_pipeline.config import Settings, get_settings
from sales_pipeline.logging_config import configure_logging
from sales_pipeline.db import get_client, get_db
from sales_pipeline.ingest.load_csv import DataLoadError, load_sales
from sales_pipeline.models import DateCursor, FilterKind
from sales_pipeline.accounts import (
    get_registration_status,
    set_registration_status,
    toggle_registration,
)
from sales_pipeline.aggregate import (
    aggregate_monthly,
    derive_filter_domain,
    filter_options,
    is_range_valid,
    series_to_frame,
    series_totals,
)
from sales_pipeline.display import (
    ChartState,
    placeholder_message,
    resolve_chart_state,
    should_hint_search,
)

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _load(args: argparse.Namespace, s: Settings) -> pd.DataFrame:
    csv_path = Path(args.csv) if args.csv else s.sales_csv_path
    return load_sales(csv_path, s.csv_blocksize)


def _cursor(text: str) -> DateCursor:
    """argparse `type=` adapter for ``YYYY-MM`` arguments."""
    try:
        return DateCursor.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid month {text!r}: expected YYYY-MM") from e


def _positive_int(text: str) -> int:
    """argparse `type=` adapter for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _write_frame(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".json":
        df.to_json(path, orient="records", indent=2)
    else:
        df.to_csv(path, index=False)
    log.info("Wrote %d rows to %s", len(df), path)


# --------------------------------------------------
# DOMAIN
# --------------------------------------------------
def cmd_domain(args: argparse.Namespace, s: Settings) -> int:
    """Print how many suppliers and items exist and the year window."""
    domain = derive_filter_domain(
        _load(args, s), (s.fallback_min_year, s.fallback_max_year)
    )
    print(f"suppliers: {len(domain.suppliers)}")
    print(f"items:     {len(domain.items)}")
    print(f"years:     {domain.min_year}-{domain.max_year}")
    return 0


# --------------------------------------------------
# OPTIONS
# --------------------------------------------------
def cmd_options(args: argparse.Namespace, s: Settings) -> int:
    """Print the (searchable, capped) values selectable for a filter kind."""
    domain = derive_filter_domain(
        _load(args, s), (s.fallback_min_year, s.fallback_max_year)
    )
    limit = args.limit if args.limit is not None else s.option_limit
    options = filter_options(domain, args.kind, args.search, limit)
    for opt in options:
        print(opt)
    if should_hint_search(options, limit):
        log.info("Showing the first %d matches; use --search to narrow results", limit)
    return 0


# --------------------------------------------------
# AGGREGATE
# --------------------------------------------------
def cmd_aggregate(args: argparse.Namespace, s: Settings) -> int:
    """Print (and optionally export) the monthly series for one selection."""
    pdf = _load(args, s)
    series = aggregate_monthly(pdf, args.kind, args.value, args.start, args.end)
    state = resolve_chart_state(
        loaded=True,
        error=None,
        range_valid=is_range_valid(args.start, args.end),
        selected_value=args.value,
        series=series,
    )
    if state is not ChartState.READY:
        log.warning(placeholder_message(state, args.kind))
        return 0 if state is ChartState.NO_DATA else 1

    df = series_to_frame(series)
    totals = series_totals(series)
    print(df.to_string(index=False))
    print(
        f"\nTotal retail sales: {totals.retail_sales:,.2f}"
        f"\nTotal warehouse sales: {totals.warehouse_sales:,.2f}"
        f"\nTotal transfers: {totals.retail_transfers:,.2f}"
    )
    if args.output:
        _write_frame(df, Path(args.output))
    return 0


# --------------------------------------------------
# REGISTRATION
# --------------------------------------------------
def cmd_registration(args: argparse.Namespace, s: Settings) -> int:
    """Show, set or toggle an account's registration flag."""
    client = get_client(s.mongo_uri)
    db = get_db(client, s.mongo_db)
    try:
        if args.toggle:
            registered = toggle_registration(db, args.uid).is_registered
        elif args.set is not None:
            registered = set_registration_status(db, args.uid, args.set == "true").is_registered
        else:
            registered = get_registration_status(db, args.uid)
    finally:
        client.close()

    print(f"{args.uid}: {'registered' if registered else 'not registered'}")
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace, Settings], int]] = {
    "domain": cmd_domain,
    "options": cmd_options,
    "aggregate": cmd_aggregate,
    "registration": cmd_registration,
}


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    kinds = [k.value for k in FilterKind]

    p = argparse.ArgumentParser(prog="sales_pipeline")
    p.add_argument("--csv", default=None, help="Override SALES_CSV_PATH")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("domain")

    p_opts = sub.add_parser("options")
    p_opts.add_argument("--kind", choices=kinds, default=FilterKind.SUPPLIER.value)
    p_opts.add_argument("--search", default="")
    p_opts.add_argument("--limit", type=_positive_int, default=None)

    p_agg = sub.add_parser("aggregate")
    p_agg.add_argument("--kind", choices=kinds, default=FilterKind.SUPPLIER.value)
    p_agg.add_argument("--value", required=True)
    p_agg.add_argument("--start", type=_cursor, required=True)
    p_agg.add_argument("--end", type=_cursor, required=True)
    p_agg.add_argument("--output", default=None, help="Write the series to .csv or .json")

    p_reg = sub.add_parser("registration")
    p_reg.add_argument("--uid", required=True)
    mode = p_reg.add_mutually_exclusive_group()
    mode.add_argument("--toggle", action="store_true")
    mode.add_argument("--set", choices=["true", "false"], default=None)

    return p


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    s = get_settings()
    configure_logging(s.log_path, stream=sys.stderr)

    try:
        return COMMANDS[args.cmd](args, s)
    except DataLoadError as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
