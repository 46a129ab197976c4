"""
Parking Query CLI - Resolve catalogs and stream parking data from the shell.

Usage:
    parking-query --catalog https://example.org/catalog catalog
    parking-query --dataset https://example.org/parkings facilities --format json
    parking-query --dataset https://example.org/parkings interval --from 1500000000 --to 1500003600
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Optional

import yaml

from .config import QueryConfig
from .errors import ParkingQueryError
from .query import ParkingDataQuery

logger = logging.getLogger(__name__)


def render(data: Any, output_format: str) -> str:
    """Render command output as text, JSON or YAML."""
    if output_format == "json":
        return json.dumps(data, indent=2, default=str)
    if output_format == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)

    lines = []
    for row in data:
        if isinstance(row, dict):
            lines.append("  ".join(str(value) for value in row.values()))
        else:
            lines.append(str(row))
    return "\n".join(lines)


def parse_fast_path(value: str) -> tuple[str, str]:
    dataset_url, sep, fast_path_url = value.partition("=")
    if not sep or not dataset_url or not fast_path_url:
        raise argparse.ArgumentTypeError(f"Expected DATASET=URL, got {value!r}")
    return dataset_url, fast_path_url


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parking-query",
        description="Query parking data from DCAT-described linked-data sources",
    )
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--catalog", action="append", default=[], help="DCAT catalog URL (repeatable)")
    parser.add_argument("--dataset", action="append", default=[], help="Dataset URL (repeatable)")
    parser.add_argument(
        "--fast-path",
        action="append",
        default=[],
        type=parse_fast_path,
        metavar="DATASET=URL",
        help="Fast-path entry point for a dataset (repeatable)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=["text", "json", "yaml"],
        default="text",
        help="Output format",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("catalog", help="List cataloged dataset endpoints")
    subparsers.add_parser("facilities", help="Stream current facilities from every dataset")

    interval_parser = subparsers.add_parser("interval", help="Stream measurements for a time range")
    interval_parser.add_argument("--from", dest="from_ts", type=int, required=True, help="Start (unix seconds)")
    interval_parser.add_argument("--to", dest="to_ts", type=int, required=True, help="End (unix seconds)")
    interval_parser.add_argument("--dataset-url", help="Query a single dataset instead of the whole catalog")
    interval_parser.add_argument("--facility", help="Only this facility URI (requires --dataset-url)")

    return parser


def load_config(args: argparse.Namespace) -> QueryConfig:
    config = QueryConfig.from_yaml(args.config) if args.config else QueryConfig()
    config = QueryConfig.from_env(config)
    config.catalogs.extend(c for c in args.catalog if c not in config.catalogs)
    config.datasets.extend(d for d in args.dataset if d not in config.datasets)
    config.fast_paths.update(dict(args.fast_path))
    return config


async def run(args: argparse.Namespace) -> int:
    """Execute a parsed command. Returns the exit code."""
    config = load_config(args)

    async with ParkingDataQuery(config) as query:
        await query.bootstrap()

        if args.command == "catalog":
            print(render(query.list_catalog(), args.format))
            return 0

        if args.command == "facilities":
            stream = query.get_facilities()
            records = [record.model_dump() for record in await stream.collect()]
            print(render(records, args.format))
            for failure in stream.errors:
                print(f"warning: {failure}", file=sys.stderr)
            return 0

        if args.command == "interval":
            if args.facility and not args.dataset_url:
                print("error: --facility requires --dataset-url", file=sys.stderr)
                return 1
            if args.facility:
                measurements = query.get_facility_interval(
                    args.from_ts, args.to_ts, args.dataset_url, args.facility
                )
            elif args.dataset_url:
                measurements = query.get_dataset_interval(args.from_ts, args.to_ts, args.dataset_url)
            else:
                measurements = query.get_interval(args.from_ts, args.to_ts)
            records = [m.model_dump(mode="json") async for m in measurements]
            print(render(records, args.format))
            return 0

    return 1


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        return asyncio.run(run(args))
    except (ParkingQueryError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
