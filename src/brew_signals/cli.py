"""Command-line interface for brew-signals."""

import argparse
import dataclasses
import json
import logging
import sys

from brew_signals import __version__
from brew_signals.exceptions import BrewSignalsError
from brew_signals.listings import load_listings
from brew_signals.runner import BatchRunner, RunnerConfig, RunSummary
from brew_signals.store import PostgresStore, StoreConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brew-signals",
        description="Enrich brewery records from reviews and external directories",
    )
    parser.add_argument("--json", action="store_true", help="Print the run summary as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--dry-run", action="store_true", help="Compute changes without writing")
    parser.add_argument(
        "--version",
        action="version",
        version=f"brew-signals {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    reviews = sub.add_parser("reviews", help="Score review themes and fill empty amenities")
    reviews.add_argument("--brewery-id", help="Only process this brewery")
    reviews.add_argument("--language", help="Review language to analyze (default: BREW_SIGNALS_REVIEW_LANGUAGE or en)")

    memberships = sub.add_parser("memberships", help="Match directory listings and merge memberships")
    memberships.add_argument("--listings", required=True, help="JSON or JSONL file of extracted listings")
    memberships.add_argument(
        "--flag",
        action="append",
        default=[],
        help="Membership token implied for every listing in the file (repeatable)",
    )

    sub.add_parser("cleanup-memberships", help="Strip description/benefits from memberships")
    sub.add_parser("dedup-reviews", help="Delete duplicate reviews, keeping the oldest")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = RunnerConfig.from_env()
    if args.dry_run:
        config = dataclasses.replace(config, dry_run=True)
    if getattr(args, "language", None):
        config = dataclasses.replace(config, review_language=args.language)

    try:
        with PostgresStore(StoreConfig.from_env()) as store:
            runner = BatchRunner(store, config)
            summary = _run(runner, args)
    except BrewSignalsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(summary.as_dict(), indent=2))
    else:
        _print_formatted(summary)

    return 1 if summary.failed else 0


def _run(runner: BatchRunner, args: argparse.Namespace) -> RunSummary:
    if args.command == "reviews":
        return runner.enrich_from_reviews(args.brewery_id)
    if args.command == "memberships":
        listings = load_listings(args.listings, default_flags=set(args.flag))
        return runner.enrich_memberships(listings)
    if args.command == "cleanup-memberships":
        return runner.cleanup_memberships()
    if args.command == "dedup-reviews":
        return runner.remove_duplicate_reviews()
    raise ValueError(f"Unsupported command: {args.command}")


def _print_formatted(summary: RunSummary) -> None:
    """Print summary in human-readable format."""
    print()
    print(f"  brew-signals {summary.job}{' (dry run)' if summary.dry_run else ''}")
    print()

    rows = [
        ("Processed", summary.processed),
        ("Updated", summary.updated),
        ("Skipped", summary.skipped),
        ("Failed", summary.failed),
        ("Unmatched", summary.unmatched),
        ("Deleted", summary.deleted),
    ]
    for label, value in rows:
        print(f"  {label + ':':<14} {value}")

    if summary.field_counts:
        print()
        for name, count in sorted(summary.field_counts.items()):
            print(f"  {name + ':':<20} {count}")

    print()


if __name__ == "__main__":
    sys.exit(main())
