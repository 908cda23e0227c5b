#!/usr/bin/env python
"""
CLI for ingesting REAXML files.

Usage:
    python -m reaxmlfeed.cli.ingest feed.xml
    python -m reaxmlfeed.cli.ingest feeds/*.xml --db /data/listings.db
    python -m reaxmlfeed.cli.ingest feed.xml --json
"""

import argparse
import json
import sys
from pathlib import Path

from reaxmlfeed.core.repository import open_repository
from reaxmlfeed.exceptions import DatabaseError
from reaxmlfeed.logging_config import setup_logging, get_logger
from reaxmlfeed.reaxml.ingestion import ingest_reaxml


def print_report(path: str, report) -> None:
    """Print a human-readable summary of one file's ingestion."""
    print("\n" + "=" * 60)
    print(f"REAXML Import: {path}")
    print("=" * 60)
    print(f"  Processed:  {report.total_processed}")
    print(f"  Successful: {report.successful}")
    print(f"  Failed:     {report.failed}")

    for result in report.results:
        line = f"  [{result.action:>14}] {result.agent_id}/{result.unique_id} ({result.property_type})"
        if result.error:
            line += f" - {result.error}"
        print(line)
        for warning in result.warnings:
            print(f"{'':19}warning: {warning}")
    print()


def main(argv=None):
    """Main entry point for the ingest CLI."""
    parser = argparse.ArgumentParser(
        description="Ingest REAXML property feed files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reaxmlfeed.cli.ingest feed.xml
    python -m reaxmlfeed.cli.ingest feeds/*.xml --db /data/listings.db
    python -m reaxmlfeed.cli.ingest feed.xml --json
        """,
    )
    parser.add_argument("files", nargs="+", help="REAXML files to ingest")
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Database path (default: from config)",
    )
    parser.add_argument("--json", action="store_true", help="Output reports as JSON")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set log level (default: WARNING)",
    )

    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(level=args.log_level, force=True)
    logger = get_logger(__name__)

    reports = {}
    exit_code = 0

    try:
        with open_repository(args.db) as repo:
            for file_name in args.files:
                try:
                    xml = Path(file_name).read_bytes()
                except OSError as e:
                    logger.error("Cannot read %s: %s", file_name, e)
                    exit_code = 1
                    continue

                report = ingest_reaxml(xml, repo)
                reports[file_name] = report
                if report.failed > 0 and report.successful == 0:
                    exit_code = 1
    except DatabaseError as e:
        logger.error("Ingestion failed: %s", e, exc_info=True)
        if args.json:
            print(json.dumps({"error": e.message}))
        else:
            print(f"Error: {e.message}")
        sys.exit(1)

    if args.json:
        print(json.dumps({path: r.to_dict() for path, r in reports.items()}, indent=2))
    else:
        for path, report in reports.items():
            print_report(path, report)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
