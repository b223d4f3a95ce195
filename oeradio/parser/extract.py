"""Line parser for the text layer of the Austrian callsign list PDF.

The published list is a table rendered to PDF. After text extraction,
each record is one line starting with the callsign, followed by columns
separated by runs of spaces::

    OE1ABC    MUSTER HANS ING.    1010 Wien    Hauptstraße 1    1

Column widths are irregular, so rows are parsed by an ordered list of
strategies. Each strategy returns a row or ``None`` and the first match
wins.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Tuple

from oeradio.models.callsign import RawCallsignRow
from oeradio.rules import HIDDEN_MARKER

CALLSIGN_LINE_RE = re.compile(r"^(OE[0-9][A-Z]{1,4})\s+(.+)$")
COLUMN_SPLIT_RE = re.compile(r"\s{2,}")
LICENSE_CLASS_RE = re.compile(r"^[1-4]$")
TRAILING_CLASS_RE = re.compile(r"\s+([1-4])$")
POSTAL_CODE_ROW_RE = re.compile(r"^(.+?)\s+(\d{4})\s+(\S+(?:\s+\S+)*)\s+(.+?)\s+([1-4])$")
NAME_AND_CLASS_RE = re.compile(r"^(.+?)\s+([1-4])$")

DEFAULT_LICENSE_CLASS = "1"

# Lines starting with any of these are headers or legal footers
NOISE_PREFIXES = ("Rufzeichen", "Gemäß", "Fernmeldebüro", "DVR:")

Strategy = Callable[[str, str], Optional[RawCallsignRow]]


def is_noise_line(line: str) -> bool:
    """Return ``True`` for blank, header, footer and page-marker lines."""
    trimmed = line.strip()
    if not trimmed:
        return True
    if trimmed.startswith(NOISE_PREFIXES):
        return True
    if "Seite " in trimmed and " von " in trimmed:
        return True
    if "Stand 20" in trimmed:
        return True
    return False


def _hidden_marker(callsign: str, rest: str) -> Optional[RawCallsignRow]:
    """Anonymized holders have all personal columns replaced by the marker."""
    if HIDDEN_MARKER not in rest:
        return None
    last = rest.strip()[-1:]
    return RawCallsignRow(
        callsign=callsign,
        name=HIDDEN_MARKER,
        location=HIDDEN_MARKER,
        address=HIDDEN_MARKER,
        license_class=last or DEFAULT_LICENSE_CLASS,
    )


def _column_split(callsign: str, rest: str) -> Optional[RawCallsignRow]:
    """Split on runs of two or more spaces: name, location, address, class."""
    parts = [p.strip() for p in COLUMN_SPLIT_RE.split(rest)]
    if len(parts) < 4:
        return None

    last = parts[-1]
    if LICENSE_CLASS_RE.match(last):
        license_class = last
        address_index = len(parts) - 2
        address = parts[address_index]
    else:
        # class digit glued to the address column
        match = TRAILING_CLASS_RE.search(last)
        license_class = match.group(1) if match else DEFAULT_LICENSE_CLASS
        address_index = len(parts) - 1
        address = TRAILING_CLASS_RE.sub("", last)

    if address_index > 2:
        location = " ".join(parts[1:address_index]).strip()
    else:
        location = parts[1]

    return RawCallsignRow(
        callsign=callsign,
        name=parts[0],
        location=location,
        address=address,
        license_class=license_class,
    )


def _postal_code_regex(callsign: str, rest: str) -> Optional[RawCallsignRow]:
    """Use an embedded 4-digit postal code to delimit the columns."""
    match = POSTAL_CODE_ROW_RE.match(rest)
    if not match:
        return None
    name, plz, locality, address, license_class = match.groups()
    return RawCallsignRow(
        callsign=callsign,
        name=name.strip(),
        location=f"{plz} {locality}".strip(),
        address=address.strip(),
        license_class=license_class,
    )


def _trailing_class(callsign: str, rest: str) -> Optional[RawCallsignRow]:
    """Name followed by a license class digit, nothing else recognizable."""
    match = NAME_AND_CLASS_RE.match(rest)
    if not match:
        return None
    return RawCallsignRow(
        callsign=callsign,
        name=match.group(1).strip(),
        location="",
        address="",
        license_class=match.group(2),
    )


def _name_only(callsign: str, rest: str) -> Optional[RawCallsignRow]:
    """Last resort: everything is the name."""
    match = TRAILING_CLASS_RE.search(rest)
    return RawCallsignRow(
        callsign=callsign,
        name=TRAILING_CLASS_RE.sub("", rest).strip(),
        location="",
        address="",
        license_class=match.group(1) if match else DEFAULT_LICENSE_CLASS,
    )


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("hidden_marker", _hidden_marker),
    ("column_split", _column_split),
    ("postal_code_regex", _postal_code_regex),
    ("trailing_class", _trailing_class),
    ("name_only", _name_only),
)


def parse_callsign_line(callsign: str, rest: str) -> Optional[RawCallsignRow]:
    """Parse the part of a record line following the callsign."""
    for _name, strategy in STRATEGIES:
        row = strategy(callsign, rest)
        if row is not None:
            return row
    return None


def parse_line(line: str) -> Optional[RawCallsignRow]:
    """Parse one extracted text line, returning ``None`` for non-record lines."""
    if is_noise_line(line):
        return None
    match = CALLSIGN_LINE_RE.match(line.strip())
    if not match:
        return None
    callsign, rest = match.groups()
    # repeated table header on each page
    if "Name" in rest and "Standort" in rest:
        return None
    return parse_callsign_line(callsign, rest)


def extract_rows(lines: Iterable[str]) -> List[RawCallsignRow]:
    """Turn extracted text lines into raw rows, preserving input order."""
    rows = []
    for line in lines:
        row = parse_line(line)
        if row is not None:
            rows.append(row)
    return rows


def extract_rows_from_text(text: str) -> List[RawCallsignRow]:
    """Convenience wrapper splitting a full text dump into lines."""
    return extract_rows(text.splitlines())
