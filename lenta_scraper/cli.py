#!/usr/bin/env python3
"""
CLI for lenta-scraper.

Usage:
    # Full run: browser + proxy, categories from config, CSV out
    python -m lenta_scraper run --config configs/example.yaml

    # Offline: extract products from a saved JSON response
    python -m lenta_scraper extract response.json --origin https://lenta.com/api/v1/catalog
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .app import ScraperApp
from .collector import DedupCollector
from .config import ConfigError, load_config
from .models import Item, Payload
from .output import write_csv
from .pipeline import process_payload
from .logger import logger, setup_logging

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2

console = Console()


def print_items(items: List[Item], title: str, limit: int = 20):
    """Pretty print the first items as a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Price", justify="right")
    table.add_column("URL", overflow="fold")

    for item in items[:limit]:
        table.add_row(item.name, item.price, item.url)

    console.print(table)
    if len(items) > limit:
        console.print(f"... and {len(items) - limit} more")


def print_stats(stats: dict):
    table = Table(title="Run Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in stats.items():
        table.add_row(key, str(value))
    console.print(table)


def cmd_run(args) -> int:
    """Full browser run."""
    try:
        config = load_config(args.config, env_file=args.env_file)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_CONFIG

    if args.headless:
        config = config.model_copy(update={"headless": True})
    if args.out:
        config = config.model_copy(update={"out_csv": args.out})

    try:
        result = asyncio.run(ScraperApp(config).run())
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"error: {e}")
        return EXIT_FAILURE

    print_stats(result.stats)
    if result.failed_categories:
        logger.warning(f"{len(result.failed_categories)} category(ies) failed")
    return EXIT_OK


def cmd_extract(args) -> int:
    """Run the extractor on a saved JSON payload."""
    path = Path(args.file)
    try:
        body = path.read_bytes()
    except OSError as e:
        logger.error(f"cannot read {path}: {e}")
        return EXIT_FAILURE

    collector = DedupCollector()
    accepted = process_payload(Payload(body=body, origin_url=args.origin), collector)
    items = collector.snapshot()
    logger.info(f"{accepted} unique item(s) in {path}")

    print_items(items, title=f"Products in {path.name}")
    if args.out:
        write_csv(args.out, items)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lenta-scraper",
        description="Collect products from a store site by intercepting its JSON API responses.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    run_p = sub.add_parser("run", help="Browse categories and write CSV")
    run_p.add_argument("--config", default="configs/example.yaml", help="Path to YAML/JSON config")
    run_p.add_argument("--env-file", default=None, help=".env file with LENTA_* overrides")
    run_p.add_argument("--out", default=None, help="Override out_csv")
    run_p.add_argument("--headless", action="store_true", help="Force headless browser")
    run_p.set_defaults(func=cmd_run)

    extract_p = sub.add_parser("extract", help="Extract products from a saved JSON response")
    extract_p.add_argument("file", help="JSON file")
    extract_p.add_argument("--origin", required=True, help="URL the JSON was fetched from")
    extract_p.add_argument("--out", default=None, help="Write CSV here")
    extract_p.set_defaults(func=cmd_extract)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not getattr(args, "func", None):
        parser.print_help()
        return EXIT_CONFIG

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
