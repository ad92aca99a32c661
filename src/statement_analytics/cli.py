#!/usr/bin/env python3
"""Command-line interface for statement-analytics."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from statement_analytics.config import (
    config_exists,
    create_default_config,
    get_config_path,
    get_output_delimiter,
    get_parser_rules,
    load_config,
    save_json_config,
)
from statement_analytics.logging_setup import configure_logging
from statement_analytics.processor import (
    StatementProcessor,
    StatementResult,
    collect_files,
)
from statement_analytics.rules import CATEGORY_VOCABULARY


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract transactions and analytics from bank statement text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  statement-analytics statement.txt
  statement-analytics ~/statements/ -o transactions.csv --report analytics.json
  statement-analytics march.xls --statement-id 2024-03 -v
  statement-analytics --list-categories
  statement-analytics --init-config

Input files must already contain text (exported .txt or spreadsheet .xls).
Extract text from PDF statements before running this tool.
        """,
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        help="Input files or directories",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="transactions.csv",
        help="Output CSV file (default: transactions.csv)",
    )
    parser.add_argument(
        "--format",
        choices=["csv", "tsv"],
        default=None,
        help="Output format (default: csv, or the delimiter from config)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        help="Write analytics for every statement to this JSON file",
    )
    parser.add_argument(
        "--statement-id",
        help="Statement identifier (only with a single input file)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.json file",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a starter config.json (to --config, or the XDG config dir)",
    )
    parser.add_argument(
        "--list-categories",
        action="store_true",
        help="List the built-in categories",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output (log every skipped line)",
    )
    return parser


def _print_result(result: StatementResult) -> None:
    summary = result.parsed.summary
    report = result.report
    print(f"{result.source.name} [{result.statement_id}]", file=sys.stderr)
    print(
        f"  Lines: {summary.lines_scanned}  "
        f"Transactions: {summary.transactions_extracted}  "
        f"Skipped: {summary.skipped_lines}",
        file=sys.stderr,
    )
    print(
        f"  Income: {report.total_income}  Expense: {report.total_expense}  "
        f"Net: {report.net}",
        file=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else None, default=logging.WARNING)

    if args.list_categories:
        print("Available categories:")
        for category in CATEGORY_VOCABULARY:
            print(f"  - {category}")
        return 0

    if args.init_config:
        target = args.config or get_config_path()
        if target.exists():
            print(f"Error: config already exists at {target}", file=sys.stderr)
            return 1
        path = save_json_config(create_default_config(), target)
        print(f"Created config at {path}")
        return 0

    if not args.inputs:
        parser.print_help()
        if not config_exists():
            print("\nNo config file found. Create one with:")
            print("  statement-analytics --init-config")
        return 1

    # Load configuration
    try:
        config: dict[str, Any] | None = load_config(args.config)
        rules = get_parser_rules(config)
    except (OSError, ValueError) as e:
        print(f"Error: could not load config: {e}", file=sys.stderr)
        return 1

    # Collect files
    files: list[Path] = []
    for inp in args.inputs:
        path = Path(inp)
        if path.is_dir():
            files.extend(collect_files(path))
        elif path.exists():
            files.append(path)
        else:
            print(f"Warning: {inp} not found", file=sys.stderr)

    if not files:
        print("Error: No valid input files found", file=sys.stderr)
        return 1

    if args.statement_id and len(files) > 1:
        print("Error: --statement-id requires exactly one input file", file=sys.stderr)
        return 1

    processor = StatementProcessor(rules=rules)
    if args.statement_id:
        result = processor.process_file(files[0], statement_id=args.statement_id)
        results = [result] if result else []
    else:
        results = processor.process_files(files)

    for result in results:
        _print_result(result)

    for filepath, error in processor.errors:
        print(f"Warning: {filepath.name}: {error}", file=sys.stderr)

    if not results:
        print("Error: no statement could be read", file=sys.stderr)
        return 1

    transactions = [tx for result in results for tx in result.transactions]

    if args.format == "tsv":
        delimiter = "\t"
    elif args.format == "csv":
        delimiter = ","
    else:
        delimiter = get_output_delimiter(config)

    output_path = Path(args.output)
    processor.write_csv(transactions, output_path, delimiter)
    print(f"Wrote {len(transactions)} transactions to {output_path}", file=sys.stderr)

    if args.report:
        processor.write_report(results, args.report)
        print(f"Wrote analytics for {len(results)} statements to {args.report}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
