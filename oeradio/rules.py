"""Austrian amateur radio callsign rules.

An Austrian callsign is ``OE`` + district digit + suffix, e.g. ``OE8YML``.
Personal suffixes have 2-3 letters; club station suffixes start with
``X`` and may have up to 4 letters. District 0 is reserved for special
cases outside the national territory.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from oeradio.models.rules import CallsignValidation, ParsedCallsign, SuffixValidation

PREFIX = "OE"
CLUB_LETTER = "X"
HIDDEN_MARKER = "*-*-*"
HIDDEN_DISPLAY_NAME = "[versteckt]"

ALL_DISTRICTS = (1, 2, 3, 4, 5, 6, 7, 8, 9)

DISTRICTS: Dict[int, str] = {
    0: "Spezial (außerhalb Hoheitsgebiet)",
    1: "Wien",
    2: "Salzburg",
    3: "Niederösterreich",
    4: "Burgenland",
    5: "Oberösterreich",
    6: "Steiermark",
    7: "Tirol",
    8: "Kärnten",
    9: "Vorarlberg",
}

LICENSE_CLASSES: Dict[int, str] = {
    1: "CEPT Klasse 1 (volle Rechte)",
    3: "CEPT Klasse 3 (eingeschränkt)",
    4: "Einsteiger (nur UKW)",
}

SUFFIX_RULES = {
    "personal": (2, 3),  # OE8ML, OE8YML
    "club": (2, 4),  # OE8XKK, OE8XKVC
}

# Operating abbreviations that make poor suffixes
CONFUSING_SUFFIXES = frozenset({"SOS", "XXX", "QRZ", "CQ"})

CALLSIGN_RE = re.compile(r"^(OE)(\d)([A-Z]{2,4})$")


def normalize(text: str) -> str:
    """Upper-case and strip a callsign or suffix."""
    return (text or "").upper().strip()


def is_club_suffix(suffix: str) -> bool:
    """Return ``True`` when the suffix marks a club station."""
    return normalize(suffix).startswith(CLUB_LETTER)


def parse_callsign(callsign: str) -> Optional[ParsedCallsign]:
    """Split a callsign into prefix, district and suffix, or ``None``."""
    match = CALLSIGN_RE.match(normalize(callsign))
    if not match:
        return None
    prefix, district, suffix = match.groups()
    return ParsedCallsign(prefix=prefix, district=int(district), suffix=suffix)


def _suffix_bounds(is_club: bool) -> tuple:
    return SUFFIX_RULES["club" if is_club else "personal"]


def _explain_parse_failure(normalized: str) -> str:
    if not normalized.startswith(PREFIX):
        return f'Callsign must start with "{PREFIX}" (Austrian prefix)'
    if len(normalized) < 4:
        return "Callsign too short (at least 4 characters: OE + district + suffix)"
    if len(normalized) > 7:
        return "Callsign too long (at most 7 characters: OE + district + 4-letter suffix)"
    district_char = normalized[2]
    if not district_char.isdigit():
        return f'District digit missing or invalid: "{district_char}" (must be 0-9)'
    suffix = normalized[3:]
    if len(suffix) < 2:
        return "Suffix too short (at least 2 letters)"
    if len(suffix) > 4:
        return "Suffix too long (at most 4 letters)"
    return "Suffix contains invalid characters (only letters A-Z allowed)"


def validate_callsign(callsign: str) -> CallsignValidation:
    """Validate a callsign against Austrian rules.

    Errors make the callsign invalid. Warnings point out things that are
    legal but noteworthy (district 0, club station, suffixes easily
    confused with operating abbreviations or digits).
    """
    normalized = normalize(callsign)
    if not normalized:
        return CallsignValidation(valid=False, errors=["Callsign must not be empty"])

    errors = []
    warnings = []

    if not re.fullmatch(r"[A-Z0-9]+", normalized):
        errors.append("Callsign contains invalid characters (only A-Z and 0-9 allowed)")

    parsed = parse_callsign(normalized)
    if parsed is None:
        errors.append(_explain_parse_failure(normalized))
        return CallsignValidation(valid=False, errors=errors, warnings=warnings)

    if parsed.district == 0:
        warnings.append("District 0 is reserved for special cases (outside national territory)")

    club = is_club_suffix(parsed.suffix)
    kind = "club" if club else "personal"
    min_len, max_len = _suffix_bounds(club)
    if len(parsed.suffix) < min_len:
        errors.append(f"Suffix too short (at least {min_len} letters for {kind} callsigns)")
    if len(parsed.suffix) > max_len:
        errors.append(f"Suffix too long (at most {max_len} letters for {kind} callsigns)")

    if club:
        warnings.append(f"Club station callsign (suffix starts with {CLUB_LETTER})")
    if parsed.suffix in CONFUSING_SUFFIXES:
        warnings.append(
            f'Suffix "{parsed.suffix}" may be confused with operating abbreviations'
        )
    if re.search(r"[OI]", parsed.suffix):
        warnings.append("Suffix contains O or I which may be confused with 0 or 1")

    return CallsignValidation(
        valid=not errors, errors=errors, warnings=warnings, parsed=parsed
    )


def validate_suffix(suffix: str, is_club: bool = False) -> SuffixValidation:
    """Validate a bare suffix for a personal or club callsign."""
    normalized = normalize(suffix)
    if not normalized:
        return SuffixValidation(valid=False, errors=["Suffix must not be empty"])

    errors = []
    if not re.fullmatch(r"[A-Z]+", normalized):
        errors.append("Suffix may only contain letters A-Z")

    min_len, max_len = _suffix_bounds(is_club)
    if len(normalized) < min_len:
        errors.append(f"Suffix too short (at least {min_len} letters)")
    if len(normalized) > max_len:
        errors.append(f"Suffix too long (at most {max_len} letters)")

    if is_club and not normalized.startswith(CLUB_LETTER):
        errors.append(f"Club suffix must start with {CLUB_LETTER}")
    if not is_club and normalized.startswith(CLUB_LETTER):
        errors.append(f"Personal suffix must not start with {CLUB_LETTER}")

    return SuffixValidation(valid=not errors, errors=errors)


def district_name(district: int) -> str:
    return DISTRICTS.get(district, "Unbekannt")


def license_class_name(license_class: int) -> str:
    return LICENSE_CLASSES.get(license_class, "Unbekannt")


def build_callsign(district: int, suffix: str) -> str:
    """Compose a full callsign from district and suffix."""
    return f"{PREFIX}{district}{normalize(suffix)}"


def is_valid_district(district: int) -> bool:
    """Return ``True`` for districts 0-9."""
    return district in DISTRICTS
