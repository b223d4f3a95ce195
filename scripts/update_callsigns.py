#!/usr/bin/env python3
"""Script to rebuild the Austrian callsign database from the fb.gv.at PDF.

Downloads the official callsign list ("Rufzeichenliste"), extracts the
text layer, parses and normalizes the rows, validates the result and only
then replaces ``data/callsigns_oe.json``. On any failure the previous
database is restored from a backup copy.

Usage:
    python scripts/update_callsigns.py
    python scripts/update_callsigns.py --pdf Rufzeichenliste_AT_Stand_010725.pdf
    python scripts/update_callsigns.py --url https://www.fb.gv.at/.../Rufzeichenliste_AT_Stand_010126.pdf
"""

import argparse
import shutil
import sys
from pathlib import Path

import httpx

from oeradio.adapters.database import CallsignDatabaseStore
from oeradio.parser.build import SOURCE_URL, build_database
from oeradio.parser.extract import extract_rows_from_text
from oeradio.parser.pdf import extract_text_from_pdf
from oeradio.parser.validate import generate_report, validate_database

DEFAULT_OUTPUT = Path("data/callsigns_oe.json")
DOWNLOAD_TIMEOUT = 60  # seconds


def fetch_pdf(url: str) -> bytes:
    """Download the callsign list PDF."""
    print(f"Fetching callsign list from: {url}")
    with httpx.Client(timeout=DOWNLOAD_TIMEOUT, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()
        return response.content


def backup_path(output: Path) -> Path:
    return output.with_name(f"{output.stem}_backup{output.suffix}")


def restore_backup(output: Path, backup: Path, backed_up: bool) -> None:
    """Put back the copy made by this run; older backups are left alone."""
    if backed_up:
        shutil.copyfile(backup, output)
        print("[OK] Restored from backup")
    else:
        print("[INFO] No backup from this run to restore")


def main() -> int:
    """Main script execution."""
    parser = argparse.ArgumentParser(description="Rebuild the Austrian callsign database")
    parser.add_argument("--url", default=SOURCE_URL, help="URL of the callsign list PDF")
    parser.add_argument("--pdf", type=Path, help="Use a local PDF instead of downloading")
    parser.add_argument(
        "--output", type=Path, default=DEFAULT_OUTPUT, help="Database file to write"
    )
    args = parser.parse_args()

    print("=== Austrian Callsign Database Update ===\n")

    output: Path = args.output
    output.parent.mkdir(parents=True, exist_ok=True)
    backup = backup_path(output)

    backed_up = output.exists()
    if backed_up:
        shutil.copyfile(output, backup)
        print("[OK] Backup created")
    else:
        print("[INFO] No existing database to backup")

    try:
        if args.pdf:
            print(f"Reading PDF from: {args.pdf}")
            content = args.pdf.read_bytes()
            source = args.pdf.name
        else:
            content = fetch_pdf(args.url)
            source = args.url
        print(f"[OK] Loaded {len(content) / 1024 / 1024:.2f} MB")

        print("Extracting text...")
        rows = extract_rows_from_text(extract_text_from_pdf(content))
        print(f"[OK] Extracted {len(rows)} raw rows")

        print("Normalizing entries...")
        database = build_database(rows, source_url=source)
        print(f"[OK] {database.count} entries after normalizing and deduplication")

        print("Validating...")
        report = validate_database(database)
        print("\n" + generate_report(report) + "\n")

        if not report.passed:
            print("[ERROR] Validation failed with errors")
            restore_backup(output, backup, backed_up)
            return 1

        CallsignDatabaseStore(output).save(database)
        print(f"[OK] Saved {database.count} entries to {output}")
        print(f"  Version: {database.version}")
        print(f"  Source: {database.source_url}")
        return 0

    except Exception as e:
        print(f"[ERROR] Update failed: {e}")
        restore_backup(output, backup, backed_up)
        return 1


if __name__ == "__main__":
    sys.exit(main())
