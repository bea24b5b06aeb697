"""Command-line interface for calendarflower.

Usage:
    calendarflower render <file> --location <code> --output <flower.html>
    calendarflower layout <file> --location <code>
    calendarflower --version
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from calendarflower import (
    FlowerOptions,
    LayoutOptions,
    LocationSelection,
    RenderOptions,
    __version__,
    render_flower,
    summarize_layout,
)
from calendarflower.compute.core.types import EventType, coerce_int
from calendarflower.compute.layout import ArcOrder
from calendarflower.config import DEFAULT_HEIGHT, DEFAULT_WIDTH


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file", type=str, help="Path to the aggregates file (CSV, JSON or Parquet)"
    )
    parser.add_argument(
        "--location", "-l", type=str, required=True, help="Location code to draw"
    )
    parser.add_argument(
        "--first-year", type=int, default=None, help="First year (default: earliest in data)"
    )
    parser.add_argument(
        "--last-year", type=int, default=None, help="Last year (default: latest in data)"
    )
    parser.add_argument(
        "--event-type",
        type=str,
        default=None,
        choices=[et.value for et in EventType],
        help="Keep only one event type",
    )
    parser.add_argument(
        "--start", type=str, default=None, help="Keep months starting on/after this ISO date"
    )
    parser.add_argument(
        "--end", type=str, default=None, help="Keep months ending on/before this ISO date"
    )
    parser.add_argument(
        "--width", type=int, default=DEFAULT_WIDTH, help=f"Canvas width (default: {DEFAULT_WIDTH})"
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Canvas height (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--arc-order",
        type=str,
        default=ArcOrder.SOURCE.value,
        choices=[o.value for o in ArcOrder],
        help="Order of arcs within a month (default: source)",
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Suppress progress output"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="calendarflower",
        description="calendarflower - Radial calendar of climate events per location",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  calendarflower render events.csv --location ES --output flower.html
  calendarflower render events.csv -l ES --first-year 1990 --last-year 2020 -o es.html
  calendarflower render events.csv -l ES --event-type Flood --viewport-width 400 -o m.html
  calendarflower layout events.csv --location ES
  calendarflower layout events.csv --location ES --output layout.json
        """,
    )

    parser.add_argument(
        "--version", "-v", action="version", version=f"calendarflower {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser(
        "render",
        help="Render the flower as an HTML document",
        description="Lay out one location's aggregates and write an interactive HTML flower.",
    )
    _add_common_arguments(render_parser)
    render_parser.add_argument(
        "--output", "-o", type=str, required=True, help="Output path (.html, .svg or .json)"
    )
    render_parser.add_argument(
        "--title", "-t", type=str, default=None, help="Custom document title"
    )
    render_parser.add_argument(
        "--viewport-width", type=int, default=None, help="Viewing device width (mobile below 768)"
    )
    render_parser.add_argument(
        "--viewport-height", type=int, default=None, help="Viewing device height"
    )
    render_parser.add_argument(
        "--show-legend",
        action="store_true",
        help="Open the legend overlay on mobile layouts",
    )

    # Layout command
    layout_parser = subparsers.add_parser(
        "layout",
        help="Output the flower geometry as JSON (no HTML)",
        description="Lay out one location's aggregates and output the geometry as JSON.",
    )
    _add_common_arguments(layout_parser)
    layout_parser.add_argument(
        "--output", "-o", type=str, default=None, help="Output path for JSON (default: stdout)"
    )

    return parser


def load_data(file_path: str):
    """Load aggregates from a file path.

    Supports CSV, Parquet and JSON files.

    Args:
        file_path: Path to the data file

    Returns:
        pandas DataFrame
    """
    import pandas as pd

    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = path.suffix.lower()

    if suffix == ".csv":
        return pd.read_csv(file_path)
    elif suffix == ".parquet":
        return pd.read_parquet(file_path)
    elif suffix == ".json":
        return pd.read_json(file_path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Use CSV, Parquet, or JSON.")


def resolve_selection(df, args: argparse.Namespace) -> LocationSelection:
    """Build the selection, taking a missing span from the data's years.

    Raises:
        ValueError: If no span is given and the data has no usable year.
    """
    first, last = args.first_year, args.last_year
    if first is None or last is None:
        years = [coerce_int(y, default=0) for y in df["year"]] if "year" in df else []
        years = [y for y in years if y > 0]
        if not years:
            raise ValueError("No year span given and no valid years in the data.")
        first = min(years) if first is None else first
        last = max(years) if last is None else last
    if first > last:
        raise ValueError(f"First year {first} is after last year {last}.")
    return LocationSelection(args.location, first, last)


def select_location(df, location: str):
    """Keep the rows of one location when the file holds several."""
    for column in ("location_code", "country_code"):
        if column in df.columns:
            return df[df[column].astype(str) == location]
    return df


def _build_config(args: argparse.Namespace, logger: logging.Logger) -> FlowerOptions:
    date_range = None
    if args.start or args.end:
        date_range = {"start": args.start, "end": args.end}
    layout = LayoutOptions(
        width=args.width,
        height=args.height,
        event_type_filter=args.event_type,
        date_range=date_range,
        arc_order=args.arc_order,
    )
    render = RenderOptions(
        title=getattr(args, "title", None),
        viewport_width=getattr(args, "viewport_width", None),
        viewport_height=getattr(args, "viewport_height", None),
        show_legend=getattr(args, "show_legend", False),
    )
    return FlowerOptions(layout=layout, render=render, logger=logger)


def _configure_logging(args: argparse.Namespace) -> logging.Logger:
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return logging.getLogger("calendarflower")


def _prepare(args: argparse.Namespace, progress):
    """Load the file and resolve selection and config.

    Returns ``(data, selection, config)``; raises on bad input.
    """
    logger = _configure_logging(args)
    progress(f"Loading data from: {args.file}")
    df = select_location(load_data(args.file), args.location)
    selection = resolve_selection(df, args)
    return df, selection, _build_config(args, logger)


def cmd_render(args: argparse.Namespace) -> int:
    """Execute the render command."""

    def progress(msg: str) -> None:
        if not args.quiet:
            print(msg)

    start_time = time.perf_counter()

    try:
        data, selection, config = _prepare(args, progress)
    except (FileNotFoundError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    progress(
        f"Rendering {selection.location_code} ({selection.first_year}-{selection.last_year})..."
    )

    try:
        report = render_flower(data, selection, config=config)
    except (TypeError, ValueError) as e:
        print(f"Error during rendering: {e}", file=sys.stderr)
        return 1

    # Save report
    try:
        report.save(args.output)
    except (OSError, ValueError) as e:
        print(f"Error saving flower: {e}", file=sys.stderr)
        return 1

    elapsed = time.perf_counter() - start_time

    progress(f"Flower saved to: {args.output}")
    progress(f"Completed in {elapsed:.1f} seconds")

    return 0


def cmd_layout(args: argparse.Namespace) -> int:
    """Execute the layout command."""

    def progress(msg: str) -> None:
        if not args.quiet:
            print(msg, file=sys.stderr)

    start_time = time.perf_counter()

    try:
        data, selection, config = _prepare(args, progress)
    except (FileNotFoundError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        summary = summarize_layout(data, selection, config=config)
    except (TypeError, ValueError) as e:
        print(f"Error during layout: {e}", file=sys.stderr)
        return 1

    # Output results
    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(summary, f, indent=2)
            progress(f"Layout saved to: {args.output}")
        except OSError as e:
            print(f"Error saving layout: {e}", file=sys.stderr)
            return 1
    else:
        print(json.dumps(summary, indent=2))

    elapsed = time.perf_counter() - start_time
    progress(f"Completed in {elapsed:.1f} seconds")

    return 0


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "render":
        return cmd_render(args)
    elif args.command == "layout":
        return cmd_layout(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
