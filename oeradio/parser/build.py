"""Assemble a callsign database from raw parsed rows."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from oeradio.models.callsign import CallsignDatabase, RawCallsignRow

from .normalize import deduplicate_entries, normalize_all, sort_entries

SOURCE_URL = (
    "https://www.fb.gv.at/dam/jcr:7a8aeec6-bbf2-4d7d-ab3b-5335ebc7b8ed/"
    "Rufzeichenliste_AT_Stand_010725.pdf"
)

LEGAL_NOTICE = (
    "Diese Daten stammen aus der öffentlichen Rufzeichenliste des "
    "österreichischen Fernmeldebüros (fb.gv.at).\n"
    "Die Verwendung ist gemäß § 150 TKG 2021 nur für Amateurfunkzwecke gestattet.\n"
    "Eine kommerzielle Nutzung oder Weitergabe an Dritte ist nicht erlaubt."
)

STAND_RE = re.compile(r"Stand_(\d{2})(\d{2})(\d{2})")


def version_from_url(url: str, today: Optional[datetime] = None) -> str:
    """``..._Stand_010725.pdf`` -> ``2025-07-01``; today's date otherwise."""
    match = STAND_RE.search(url)
    if match:
        day, month, year = match.groups()
        return f"20{year}-{month}-{day}"
    return (today or datetime.now(timezone.utc)).strftime("%Y-%m-%d")


def build_database(
    rows: Iterable[RawCallsignRow],
    source_url: str = SOURCE_URL,
    parsed_at: Optional[datetime] = None,
) -> CallsignDatabase:
    """Normalize, deduplicate and sort rows into a database document."""
    entries = sort_entries(deduplicate_entries(normalize_all(rows)))
    parsed_at = parsed_at or datetime.now(timezone.utc)
    return CallsignDatabase(
        version=version_from_url(source_url, today=parsed_at),
        source_url=source_url,
        parsed_at=parsed_at.isoformat(),
        count=len(entries),
        legal_notice=LEGAL_NOTICE,
        entries=entries,
    )
