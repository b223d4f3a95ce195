"""Normalization of raw parsed rows into canonical callsign records."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from oeradio.middleware.logging import log_warning
from oeradio.models.callsign import CallsignRecord, RawCallsignRow
from oeradio.rules import CLUB_LETTER, HIDDEN_MARKER

RECORD_CALLSIGN_RE = re.compile(r"^(OE)([0-9])([A-Z]{1,4})$")
LOCATION_RE = re.compile(r"^(\d{4})\s+(.+)$")

TITLES = frozenset(
    {
        "ING", "ING.", "MAG", "MAG.", "DR", "DR.", "DIPL", "DIPL.",
        "DIPL.-ING", "DIPL.-ING.", "JUN", "JUN.", "SEN", "SEN.",
        "BAKK", "BAKK.", "BSC", "BSC.", "MSC", "MSC.", "MBA",
        "PROF", "PROF.", "UNIV.-PROF", "UNIV.-PROF.", "DKFM", "DKFM.",
        "OING", "OING.", "BAUING", "BAUING.", "BMSTR", "BMSTR.",
    }
)

LOWERCASE_PARTICLES = frozenset({"von", "van", "de", "der", "den", "du", "la", "le"})


def format_name_part(part: str) -> str:
    """Title-case one name token, keeping hyphenated segments and particles."""
    if not part:
        return ""
    if "-" in part:
        return "-".join(format_name_part(p) for p in part.split("-"))
    if part.lower() in LOWERCASE_PARTICLES:
        return part.lower()
    return part[0].upper() + part[1:].lower()


def normalize_name(name: str) -> str:
    """Turn ``"LASTNAME FIRSTNAME [TITLE]"`` into ``"Firstname Lastname"``.

    Academic titles are dropped. The first remaining token is taken as
    the surname, everything after it as given names.
    """
    if not name or name == HIDDEN_MARKER:
        return ""

    parts = [p for p in name.split() if p.upper() not in TITLES]
    if not parts:
        return name

    if len(parts) >= 2:
        last_name = parts[0]
        first_names = " ".join(format_name_part(p) for p in parts[1:])
        return f"{first_names} {format_name_part(last_name)}"

    return format_name_part(parts[0])


def parse_location(location: str) -> Dict[str, str]:
    """Split ``"1010 Wien"`` into postal code and locality."""
    if not location or location == HIDDEN_MARKER:
        return {"plz": "", "qth": ""}

    match = LOCATION_RE.match(location.strip())
    if match:
        return {"plz": match.group(1), "qth": match.group(2).strip()}

    return {"plz": "", "qth": location.strip()}


def _parse_license_class(raw: str) -> int:
    try:
        return int(raw) or 1
    except (TypeError, ValueError):
        return 1


def normalize_entry(raw: RawCallsignRow) -> Optional[CallsignRecord]:
    """Build a canonical record from a raw row, or ``None`` if malformed."""
    match = RECORD_CALLSIGN_RE.match(raw.callsign)
    if not match:
        log_warning("callsign_invalid_format", callsign=raw.callsign)
        return None

    prefix, district, suffix = match.groups()
    is_hidden = HIDDEN_MARKER in raw.name

    if is_hidden:
        name = qth = plz = address = ""
    else:
        name = normalize_name(raw.name)
        location = parse_location(raw.location)
        qth, plz = location["qth"], location["plz"]
        address = raw.address

    return CallsignRecord(
        callsign=raw.callsign,
        prefix=prefix,
        district=int(district),
        suffix=suffix,
        name=name,
        qth=qth,
        plz=plz,
        address=address,
        license_class=_parse_license_class(raw.license_class),
        is_club=suffix.startswith(CLUB_LETTER),
        is_hidden=is_hidden,
    )


def normalize_all(rows: Iterable[RawCallsignRow]) -> List[CallsignRecord]:
    """Normalize rows, dropping the ones rejected by ``normalize_entry``."""
    results = []
    for row in rows:
        record = normalize_entry(row)
        if record is not None:
            results.append(record)
    return results


def deduplicate_entries(entries: Iterable[CallsignRecord]) -> List[CallsignRecord]:
    """Keep the first record per callsign, in input order."""
    seen = set()
    unique = []
    for entry in entries:
        if entry.callsign not in seen:
            seen.add(entry.callsign)
            unique.append(entry)
    return unique


def sort_entries(entries: Iterable[CallsignRecord]) -> List[CallsignRecord]:
    """Return a new list ordered by callsign."""
    return sorted(entries, key=lambda e: e.callsign)
