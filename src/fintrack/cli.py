#!/usr/bin/env python3
"""Command-line interface for fintrack."""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Any

import requests

from fintrack.aggregation import aggregate, sort_by_month
from fintrack.config import (
    config_exists,
    create_default_config,
    get_access_token,
    get_owner_id,
    get_store_settings,
    load_config,
    save_json_config,
)
from fintrack.filters import filter_transactions
from fintrack.models import FILTER_KINDS, KIND_ALL, FilterCriteria, Summary, Transaction
from fintrack.snapshot import SnapshotLoader
from fintrack.store import StoreClient
from fintrack.utils import parse_date


def _date_arg(value: str) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r}")
    return parsed


def build_criteria(args: argparse.Namespace, today: date | None = None) -> FilterCriteria:
    """Build filter criteria from parsed command-line arguments."""
    options: dict[str, Any] = {
        "kind": args.type,
        "category_contains": args.category or "",
        "search_text": args.search or "",
    }
    if args.current_month:
        criteria = FilterCriteria.current_month(today, **options)
    else:
        criteria = FilterCriteria(**options)

    if args.date_from or args.date_to:
        criteria = criteria.with_dates(
            args.date_from or criteria.date_from,
            args.date_to or criteria.date_to,
        )
    return criteria


def format_summary(summary: Summary, months_sorted: bool = False) -> str:
    """Render the dashboard summary as plain text."""
    lines = [
        f"Balance:         {summary.balance:>12.2f}",
        f"Total income:    {summary.total_income:>12.2f}",
        f"Total expenses:  {summary.total_expense:>12.2f}",
        "",
        "Income vs expenses by month:",
    ]

    buckets = summary.monthly_series
    if months_sorted:
        buckets = sort_by_month(buckets)
    if not buckets:
        lines.append("  No data available")
    for bucket in buckets:
        lines.append(
            f"  {bucket.month_key}  income {bucket.income_total:>10.2f}  "
            f"expenses {bucket.expense_total:>10.2f}  net {bucket.net:>10.2f}"
        )

    largest = summary.highlights.largest_expense
    lines.append("")
    lines.append("Highlights:")
    if largest:
        lines.append(f"  Largest expense:      {largest.amount:.2f} - {largest.description}")
    else:
        lines.append("  Largest expense:      No expenses")
    lines.append(f"  Most used category:   {summary.highlights.most_frequent_category}")
    return "\n".join(lines)


def format_transaction(tx: Transaction) -> str:
    """Render one transaction as a list line."""
    sign = "+" if tx.is_income else "-"
    return f"{tx.date}  {sign}{tx.amount:>10.2f}  {tx.description[:40]:<40}  {tx.category}"


def _fetch(args: argparse.Namespace, config: dict[str, Any] | None) -> list[Transaction] | None:
    settings = get_store_settings(config, args.store_url, args.api_key)
    if not settings:
        print("Error: data service URL and API key required. Use --store-url/--api-key "
              "or configure in config.json", file=sys.stderr)
        return None

    owner_id = get_owner_id(config, args.owner)
    if not owner_id:
        print("Error: owner id required. Use --owner or configure in config.json",
              file=sys.stderr)
        return None

    url, api_key = settings
    client = StoreClient(url, api_key, access_token=get_access_token(config))
    try:
        return client.fetch_transactions(owner_id)
    except requests.RequestException as e:
        print(f"Error fetching transactions: {e}", file=sys.stderr)
        return None
    except ValueError as e:
        print(f"Error reading transactions: {e}", file=sys.stderr)
        return None


def _collect_files(inputs: list[str]) -> list[Path]:
    files: list[Path] = []
    for inp in inputs:
        path = Path(inp)
        if path.is_dir():
            files.extend(SnapshotLoader.find_files(path))
        elif path.exists():
            files.append(path)
        else:
            print(f"Warning: {inp} not found", file=sys.stderr)
    return files


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Summarize and filter personal income and expense transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fintrack export.csv
  fintrack exports/ --list --type expense --category food
  fintrack --fetch --list --current-month --search market
  fintrack export.json --list --from 2024-01-01 --to 2024-03-31 -o q1.csv
  fintrack --init-config
        """,
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        help="Exported transaction files (csv, tsv, json) or directories",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Load transactions from the data service instead of files",
    )
    parser.add_argument("--owner", help="Owner id to fetch (or configure in config.json)")
    parser.add_argument("--store-url", help="Data service URL (or configure in config.json)")
    parser.add_argument("--api-key", help="Data service API key (or configure in config.json)")

    # Views
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Show balance, monthly totals and highlights (default view)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Show the filtered transaction list",
    )
    parser.add_argument(
        "--months-sorted",
        action="store_true",
        help="Show months in chronological order instead of first-seen order",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON",
    )

    # Filters
    parser.add_argument(
        "--type",
        choices=list(FILTER_KINDS),
        default=KIND_ALL,
        help="Transaction type to list (default: all)",
    )
    parser.add_argument("--category", help="Only categories containing this text")
    parser.add_argument("--search", help="Text to find in description or category")
    parser.add_argument("--from", dest="date_from", type=_date_arg, help="First date (inclusive)")
    parser.add_argument("--to", dest="date_to", type=_date_arg, help="Last date (inclusive)")
    parser.add_argument(
        "--current-month",
        action="store_true",
        help="Limit the list to the first of this month through today",
    )

    # Output
    parser.add_argument(
        "-o",
        "--output",
        help="Write the filtered list to this CSV file",
    )
    parser.add_argument(
        "--format",
        choices=["csv", "tsv"],
        default="csv",
        help="Output format (default: csv)",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        help="Sort loaded files by date, newest first",
    )

    # Config
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write an empty configuration file to the config directory",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        path = save_json_config(create_default_config(), args.config)
        print(f"Wrote default configuration to {path}", file=sys.stderr)
        return 0

    # Load configuration
    config: dict[str, Any] | None = load_config(args.config)

    if args.show_config:
        if config:
            shown = json.loads(json.dumps(config))
            store = shown.get("store", {})
            for secret in ("api_key", "access_token"):
                if store.get(secret):
                    store[secret] = "***"
            print(json.dumps(shown, indent=2))
        else:
            print("No configuration found.")
            print("Run 'fintrack --init-config' to create one.")
        return 0

    # Load the snapshot
    if args.fetch:
        fetched = _fetch(args, config)
        if fetched is None:
            return 1
        transactions = fetched
        if args.verbose:
            print(f"Fetched {len(transactions)} transactions", file=sys.stderr)
    else:
        if not args.inputs:
            if not config_exists():
                print("No input files given and no configuration found.", file=sys.stderr)
            parser.print_help()
            return 1

        files = _collect_files(args.inputs)
        if not files:
            print("Error: No valid input files found", file=sys.stderr)
            return 1

        loader = SnapshotLoader(sort_descending=args.sort)
        transactions = loader.load_files(files)

        for filepath, error in loader.errors:
            print(f"Warning: {filepath.name}: {error}", file=sys.stderr)
        if args.verbose:
            print(f"Processed {len(files)} files", file=sys.stderr)
            print(f"Found {len(transactions)} transactions", file=sys.stderr)

        if loader.errors:
            print(f"Errors: {len(loader.errors)} files failed", file=sys.stderr)
            return 1

    show_list = args.list or bool(args.output)
    show_summary = args.summary or args.json or not show_list

    if show_summary:
        summary = aggregate(transactions)
        if args.json:
            print(json.dumps(summary.to_dict(), indent=2))
        else:
            print(format_summary(summary, months_sorted=args.months_sorted))

    if show_list:
        criteria = build_criteria(args)
        filtered = filter_transactions(transactions, criteria)

        if args.list:
            if show_summary:
                print()
            for tx in filtered:
                print(format_transaction(tx))
            print(f"{len(filtered)} of {len(transactions)} transactions", file=sys.stderr)

        if args.output:
            output_path = Path(args.output)
            delimiter = "\t" if args.format == "tsv" else ","
            SnapshotLoader.write_csv(filtered, output_path, delimiter)
            print(f"Wrote {len(filtered)} transactions to {output_path}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
