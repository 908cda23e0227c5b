#!/usr/bin/env python
"""
CLI for managing agencies.

Feeds are only accepted for agencies registered here beforehand.

Usage:
    python -m reaxmlfeed.cli.agency register XNWXNW "Example Realty"
    python -m reaxmlfeed.cli.agency list
"""

import argparse
import json
import sys

from reaxmlfeed.core.repository import open_repository
from reaxmlfeed.exceptions import DatabaseError, ValidationError
from reaxmlfeed.logging_config import setup_logging, get_logger


def main(argv=None):
    """Main entry point for the agency CLI."""
    parser = argparse.ArgumentParser(
        description="Register and list agencies accepted in REAXML feeds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reaxmlfeed.cli.agency register XNWXNW "Example Realty"
    python -m reaxmlfeed.cli.agency list --json
        """,
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Database path (default: from config)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set log level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    register = subparsers.add_parser("register", help="Register an agency code")
    register.add_argument("code", help="Agency code as sent in <agentID>")
    register.add_argument("name", help="Agency display name")

    list_parser = subparsers.add_parser("list", help="List registered agencies")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(level=args.log_level, force=True)
    logger = get_logger(__name__)

    try:
        with open_repository(args.db) as repo:
            if args.command == "register":
                agency_id = repo.register_agency(args.code, args.name)
                print(f"Registered {args.code.strip()} ({agency_id})")
                return

            agencies = repo.list_agencies()
    except ValidationError as e:
        print(f"Error: {e.message}")
        sys.exit(2)
    except DatabaseError as e:
        logger.error("Agency command failed: %s", e, exc_info=True)
        print(f"Error: {e.message}")
        sys.exit(1)

    if args.json:
        print(json.dumps(agencies, indent=2))
    elif not agencies:
        print("No agencies registered")
    else:
        for agency in agencies:
            print(f"  {agency['agent_id_code']:<12} {agency['name']}")


if __name__ == "__main__":
    main()
