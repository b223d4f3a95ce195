#!/usr/bin/env python3
"""Script to validate the current Austrian callsign database.

Exits with status 1 when the database is missing, unreadable or has
validation errors.

Usage:
    python scripts/validate_callsigns.py
    python scripts/validate_callsigns.py --path data/callsigns_oe.json
"""

import argparse
import sys
from pathlib import Path

from oeradio.adapters.database import (
    CallsignDatabaseError,
    CallsignDatabaseMissingError,
    CallsignDatabaseStore,
)
from oeradio.parser.validate import generate_report, validate_database


def main() -> int:
    """Main script execution."""
    parser = argparse.ArgumentParser(description="Validate the Austrian callsign database")
    parser.add_argument(
        "--path", type=Path, default=Path("data/callsigns_oe.json"), help="Database file"
    )
    args = parser.parse_args()

    print("=== Callsign Database Validation ===\n")

    try:
        database = CallsignDatabaseStore(args.path).load()
    except CallsignDatabaseMissingError:
        print(f"[ERROR] Database file not found: {args.path}")
        print("Run scripts/update_callsigns.py first to create the database.")
        return 1
    except CallsignDatabaseError as e:
        print(f"[ERROR] {e}")
        return 1

    print(f"Database version: {database.version}")
    print(f"Parsed at: {database.parsed_at}")
    print(f"Entry count: {database.count}\n")

    report = validate_database(database)
    print(generate_report(report))

    return 0 if report.passed else 1


if __name__ == "__main__":
    sys.exit(main())
