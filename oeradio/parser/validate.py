"""Validation of a freshly built callsign database.

A report with at least one error must keep the new database from
replacing the current one. Warnings are informational.
"""

from __future__ import annotations

import re
from typing import List

from oeradio.models.callsign import (
    CallsignDatabase,
    CallsignRecord,
    ValidationReport,
    ValidationStats,
)
from oeradio.rules import ALL_DISTRICTS

VALID_CALLSIGN_RE = re.compile(r"^OE[0-9][A-Z]{1,4}$")

MIN_TOTAL_ENTRIES = 5000
MIN_DISTRICT_ENTRIES = 100
MIN_CLASS_1_ENTRIES = 1000
MAX_HIDDEN_PERCENT = 30.0
REPORT_LIST_LIMIT = 20


def is_valid_callsign(callsign: str) -> bool:
    """Austrian callsign format: OE + digit + 1-4 letters."""
    return bool(VALID_CALLSIGN_RE.match(callsign))


def validate_database(db: CallsignDatabase) -> ValidationReport:
    """Check structural invariants and plausibility of a database."""
    errors: List[str] = []
    warnings: List[str] = []
    stats = ValidationStats(total=len(db.entries))
    seen = set()

    for entry in db.entries:
        if entry.callsign in seen:
            errors.append(f"Duplicate callsign: {entry.callsign}")
            stats.duplicates += 1
        seen.add(entry.callsign)

        if not is_valid_callsign(entry.callsign):
            errors.append(f"Invalid callsign format: {entry.callsign}")

        digit = entry.callsign[2:3]
        expected = int(digit) if digit.isdigit() else None
        if entry.district != expected:
            errors.append(
                f"District mismatch for {entry.callsign}: "
                f"expected {expected}, got {entry.district}"
            )

        if not 1 <= entry.license_class <= 4:
            warnings.append(
                f"Unusual license class for {entry.callsign}: {entry.license_class}"
            )

        if not 1 <= len(entry.suffix) <= 4:
            warnings.append(f"Unusual suffix length for {entry.callsign}: {entry.suffix}")

        stats.by_district[entry.district] = stats.by_district.get(entry.district, 0) + 1
        stats.by_license_class[entry.license_class] = (
            stats.by_license_class.get(entry.license_class, 0) + 1
        )
        if entry.is_club:
            stats.club_stations += 1
        if entry.is_hidden:
            stats.hidden_entries += 1

    if stats.total < MIN_TOTAL_ENTRIES:
        warnings.append(f"Unusually low entry count: {stats.total} (expected ~6000+)")

    for district in ALL_DISTRICTS:
        count = stats.by_district.get(district, 0)
        if count == 0:
            errors.append(f"No entries for district {district}")
        elif count < MIN_DISTRICT_ENTRIES:
            warnings.append(f"Very few entries for district {district}: {count}")

    for district in stats.by_district:
        if not 0 <= district <= 9:
            errors.append(f"Invalid district number: {district}")

    class_1 = stats.by_license_class.get(1, 0)
    if class_1 < MIN_CLASS_1_ENTRIES:
        warnings.append(f"Unusually few class 1 licenses: {class_1}")

    if stats.total:
        hidden_percent = stats.hidden_entries / stats.total * 100
        if hidden_percent > MAX_HIDDEN_PERCENT:
            warnings.append(f"High percentage of hidden entries: {hidden_percent:.1f}%")

    return ValidationReport(errors=errors, warnings=warnings, stats=stats)


def validate_entry(entry: CallsignRecord) -> List[str]:
    """Return the problems of a single record (empty list when fine)."""
    errors = []
    if not is_valid_callsign(entry.callsign):
        errors.append("Invalid callsign format")
    if not 0 <= entry.district <= 9:
        errors.append("Invalid district number")
    if not 1 <= entry.license_class <= 4:
        errors.append("Invalid license class")
    if not entry.is_hidden and len(entry.name) < 2:
        errors.append("Missing or invalid name")
    return errors


def _append_limited(lines: List[str], title: str, items: List[str]) -> None:
    if not items:
        return
    lines.append(f"{title} ({len(items)}):")
    for item in items[:REPORT_LIST_LIMIT]:
        lines.append(f"  - {item}")
    if len(items) > REPORT_LIST_LIMIT:
        lines.append(f"  ... and {len(items) - REPORT_LIST_LIMIT} more")
    lines.append("")


def generate_report(report: ValidationReport) -> str:
    """Render a validation report as plain text for the batch job output."""
    stats = report.stats
    lines = ["=== Callsign Database Validation Report ===", ""]

    lines.append("Statistics:")
    lines.append(f"  Total entries: {stats.total}")
    lines.append(f"  Club stations: {stats.club_stations}")
    lines.append(f"  Hidden entries: {stats.hidden_entries}")
    lines.append(f"  Duplicates: {stats.duplicates}")
    lines.append("")

    lines.append("By District:")
    for district in ALL_DISTRICTS:
        lines.append(f"  OE{district}: {stats.by_district.get(district, 0)}")
    if stats.by_district.get(0):
        lines.append(f"  OE0: {stats.by_district[0]}")
    lines.append("")

    lines.append("By License Class:")
    for license_class in range(1, 5):
        lines.append(f"  Class {license_class}: {stats.by_license_class.get(license_class, 0)}")
    lines.append("")

    _append_limited(lines, "Errors", report.errors)
    _append_limited(lines, "Warnings", report.warnings)

    lines.append("Summary:")
    if not report.errors and not report.warnings:
        lines.append("  All checks passed!")
    elif not report.errors:
        lines.append(f"  Passed with {len(report.warnings)} warning(s)")
    else:
        lines.append(
            f"  Failed with {len(report.errors)} error(s) "
            f"and {len(report.warnings)} warning(s)"
        )

    return "\n".join(lines)
