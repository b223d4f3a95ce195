"""Suffix availability across the Austrian districts."""

from __future__ import annotations

import string
from typing import Dict, Iterable, List, Optional

from oeradio.adapters.database import CallsignDatabaseStore
from oeradio.models.lookup import AvailabilityResult
from oeradio.rules import (
    ALL_DISTRICTS,
    CLUB_LETTER,
    is_club_suffix,
    is_valid_district,
    normalize,
    validate_suffix,
)


def check_availability(
    store: CallsignDatabaseStore, suffix: str, district: Optional[int] = None
) -> AvailabilityResult:
    """Check in which districts ``suffix`` is still free.

    An invalid suffix or district is reported as available nowhere
    without touching the database.
    """
    normalized = normalize(suffix)
    validation = validate_suffix(normalized, is_club=is_club_suffix(normalized))
    if not validation.valid or (district is not None and not is_valid_district(district)):
        return AvailabilityResult(suffix=normalized, available=False)

    districts = [district] if district is not None else list(ALL_DISTRICTS)
    return store.check_suffix(normalized, districts)


def check_multiple_availability(
    store: CallsignDatabaseStore,
    suffixes: Iterable[str],
    district: Optional[int] = None,
) -> Dict[str, AvailabilityResult]:
    """Availability for several suffixes, keyed by the normalized suffix."""
    return {normalize(s): check_availability(store, s, district) for s in suffixes}


def find_available_two_letter_suffixes(
    store: CallsignDatabaseStore,
    district: int,
    exclude_club: bool = False,
    club_only: bool = False,
) -> List[str]:
    """All free two-letter suffixes in one district, sorted."""
    if not is_valid_district(district):
        return []

    suffixes = []
    for first in string.ascii_uppercase:
        if exclude_club and first == CLUB_LETTER:
            continue
        if club_only and first != CLUB_LETTER:
            continue
        suffixes.extend(first + second for second in string.ascii_uppercase)

    results = check_multiple_availability(store, suffixes, district)
    return sorted(suffix for suffix, result in results.items() if result.available)
