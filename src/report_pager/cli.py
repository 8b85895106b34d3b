"""Command-line interface for the report paginator."""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .config import ConfigError, PaginationOptions, TableVariant, load_config
from .layout_engine import Orientation, PageLayout, PageSize
from .logging import configure_logging, get_logger
from .normalizer import TableModelError, normalize_table
from .pages_writer import (
    format_summary, summarize_pages, write_pages_json, write_pages_jsonl
)
from .paginator import paginate_table
from .sample_tables import generate_table
from .table_model import table_model_to_dict

logger = get_logger(__name__)

PAGE_SIZE_CHOICES = [size.value for size in PageSize]
ORIENTATION_CHOICES = [o.value for o in Orientation]
VARIANT_CHOICES = [v.value for v in TableVariant]


def _fail(parser: argparse.ArgumentParser, event: str, message: str, **fields) -> None:
    """Log a failure, then exit through argparse with status 2."""
    logger.error(event, **fields)
    parser.error(message)


def _load_options(parser: argparse.ArgumentParser, args: argparse.Namespace) -> PaginationOptions:
    """Config file first, then CLI overrides."""
    try:
        options = load_config(args.config)
    except FileNotFoundError:
        _fail(parser, "cli.config_missing", f"config file not found: {args.config}",
              path=str(args.config))
    except (ConfigError, yaml.YAMLError, TypeError) as exc:
        _fail(parser, "cli.config_invalid", f"invalid config {args.config}: {exc}",
              path=str(args.config), error=str(exc))

    if args.page_size:
        options.page_size = args.page_size
    if args.orientation:
        options.orientation = args.orientation
    if args.variant:
        options.variant = TableVariant.coerce(args.variant)
    if getattr(args, "no_keep_subtotals", False):
        options.keep_subtotals_together = False
    return options


def cmd_paginate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    options = _load_options(parser, args)

    try:
        with open(args.input, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        _fail(parser, "cli.input_missing", f"input file not found: {args.input}",
              path=str(args.input))
    except json.JSONDecodeError as exc:
        _fail(parser, "cli.input_invalid_json", f"input is not valid JSON: {exc}",
              path=str(args.input), error=str(exc))

    try:
        table = normalize_table(raw)
    except TableModelError as exc:
        _fail(parser, "cli.table_invalid", f"invalid table model: {exc}",
              path=str(args.input), error=str(exc))

    pages = paginate_table(table, options)

    out_path = args.output
    if out_path is None:
        suffix = ".pages.jsonl" if args.jsonl else ".pages.json"
        out_path = args.input.with_name(args.input.stem + suffix)

    if args.jsonl:
        write_pages_jsonl(pages, out_path)
    else:
        write_pages_json(pages, out_path)

    header_rows = table.header_row_count if table is not None else 1
    print(f"Paginated {len(table.rows) if table else 0} rows into {len(pages)} pages")
    for line in format_summary(summarize_pages(pages, header_rows)):
        print(line)
    print(f"Output: {out_path}")
    return 0


def cmd_budget(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    options = _load_options(parser, args)
    layout = PageLayout.for_page(
        options.page_size,
        options.orientation,
        args.header_rows,
        options.resolve_geometry(),
    )
    print(f"Page: {layout.page_size.value} {layout.orientation.value}")
    print(f"  Page height: {layout.page_height:.1f}px, available: {layout.available_height:.1f}px")
    print(f"  Row height: {layout.row_height:g}px, header rows: {layout.header_row_count}")
    print(f"  Max data rows per page: {layout.max_data_rows}")
    print(f"  Total rows per page: {layout.total_rows_per_page}")
    return 0


def cmd_sample(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    variant = TableVariant.coerce(args.variant)
    kwargs = {}
    if variant is TableVariant.DATA:
        kwargs["num_rows"] = args.rows
    else:
        kwargs["num_groups"] = args.groups

    table = generate_table(variant, seed=args.seed, **kwargs)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(table_model_to_dict(table), f, indent=2, sort_keys=True)
        f.write("\n")

    print(f"Wrote {variant.value} table with {len(table.rows)} rows to {args.output}")
    return 0


def _add_page_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML pagination config",
    )
    parser.add_argument(
        "--page-size",
        choices=PAGE_SIZE_CHOICES,
        help="Paper size (overrides config)",
    )
    parser.add_argument(
        "--orientation",
        choices=ORIENTATION_CHOICES,
        help="Page orientation (overrides config)",
    )
    parser.add_argument(
        "--variant",
        choices=VARIANT_CHOICES,
        help="Table variant (overrides config)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="report-pager",
        description="Split report tables into fixed-size print pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for structured pagination events",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    paginate = subparsers.add_parser("paginate", help="Paginate a table model JSON file")
    paginate.add_argument("input", type=Path, help="Table model JSON file")
    paginate.add_argument(
        "-o", "--output",
        type=Path,
        help="Output path (default: <input>.pages.json)",
    )
    paginate.add_argument(
        "--jsonl",
        action="store_true",
        help="Write one page per line",
    )
    paginate.add_argument(
        "--no-keep-subtotals",
        action="store_true",
        help="Pack rows one by one even when the table has subtotals",
    )
    _add_page_arguments(paginate)
    paginate.set_defaults(handler=cmd_paginate)

    budget = subparsers.add_parser("budget", help="Show the data-row budget for a page")
    budget.add_argument(
        "--header-rows",
        type=int,
        default=1,
        help="Number of table header rows",
    )
    _add_page_arguments(budget)
    budget.set_defaults(handler=cmd_budget)

    sample = subparsers.add_parser("sample", help="Write a synthetic table model")
    sample.add_argument("output", type=Path, help="Output JSON path")
    sample.add_argument(
        "--variant",
        choices=VARIANT_CHOICES,
        default=TableVariant.PIVOT.value,
        help="Table variant to generate",
    )
    sample.add_argument(
        "--groups",
        type=int,
        default=6,
        help="Subtotal groups (pivot and aggregate)",
    )
    sample.add_argument(
        "--rows",
        type=int,
        default=100,
        help="Row count (data variant)",
    )
    sample.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed",
    )
    sample.set_defaults(handler=cmd_sample)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level, json_output=False)
    return args.handler(parser, args)


if __name__ == "__main__":
    sys.exit(main())
