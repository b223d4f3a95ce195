"""Suffix suggestions derived from a person's name.

Candidates are scored for pronounceability (phonetic score) and Morse
brevity (CW score), filtered by availability and ranked by
``0.6 * phonetic + 0.4 * cw``.
"""

from __future__ import annotations

import random
import re
import string
from typing import Dict, List, Optional, Tuple

from oeradio.adapters.database import CallsignDatabaseStore
from oeradio.models.lookup import CallsignSuggestion, SuggestOptions
from oeradio.rules import ALL_DISTRICTS, CLUB_LETTER, SUFFIX_RULES, is_valid_district

# Morse element weight per letter; shorter code, lower weight
MORSE_WEIGHTS: Dict[str, int] = {
    "E": 1, "T": 1,
    "A": 2, "I": 2, "M": 2, "N": 2,
    "D": 3, "G": 3, "K": 3, "O": 3, "R": 3, "S": 3, "U": 3, "W": 3,
    "B": 4, "C": 4, "F": 4, "H": 4, "J": 4, "L": 4, "P": 4, "Q": 4,
    "V": 4, "X": 4, "Y": 4, "Z": 4,
}
DEFAULT_MORSE_WEIGHT = 4

VOWELS = frozenset("AEIOU")

DIFFICULT_PATTERNS = (
    re.compile(r"[XQZ]{2,}"),
    re.compile(r"[B-DF-HJ-NP-TV-Z]{3,}"),
    re.compile(r"[AEIOU]{3,}"),
)

# Easily mistaken for 0 and 1
CONFUSABLE_LETTERS = frozenset("OI")

SIMILAR_SOUNDING_PAIRS = ("MN", "NM", "BD", "DB", "PB", "BP", "FV", "VF")

PHONETIC_VARIANTS: Dict[str, Tuple[str, ...]] = {
    "MICHAEL": ("MIC", "MIK", "MHL"),
    "THOMAS": ("TOM", "THS", "TMS"),
    "STEFAN": ("STF", "STE", "STN"),
    "ANDREAS": ("AND", "ADS", "ANS"),
    "CHRISTIAN": ("CHR", "CRS", "CHN"),
    "MARTIN": ("MAR", "MRT", "MTN"),
    "PETER": ("PET", "PTR", "PTE"),
    "FRANZ": ("FRZ", "FRA", "FNZ"),
    "WOLFGANG": ("WOL", "WFG", "WLF"),
    "HANS": ("HNS", "HAS", "HAN"),
    "JOSEF": ("JOS", "JSF", "JOE"),
    "KARL": ("KRL", "KAR", "KAL"),
    "HELMUT": ("HLM", "HMT", "HEL"),
}

RANDOM_ATTEMPT_FACTOR = 20
RANDOM_DERIVATION = "Randomly generated"

_SUFFIX_RE = re.compile(r"^[A-Z]{2,3}$")


def calculate_cw_score(suffix: str) -> float:
    """Morse brevity in [0, 1]; all-``E`` scores 1.0, all-4-weight letters 0.0."""
    if not suffix:
        return 0.0
    upper = suffix.upper()
    total = sum(MORSE_WEIGHTS.get(c, DEFAULT_MORSE_WEIGHT) for c in upper)
    min_weight = len(upper) * min(MORSE_WEIGHTS.values())
    max_weight = len(upper) * DEFAULT_MORSE_WEIGHT
    if max_weight == min_weight:
        return 1.0
    return round(1 - (total - min_weight) / (max_weight - min_weight), 2)


def calculate_phonetic_score(suffix: str) -> float:
    """Pronounceability in [0, 1]."""
    if not suffix:
        return 0.0
    upper = suffix.upper()
    score = 1.0

    vowels = sum(1 for c in upper if c in VOWELS)
    if vowels == 0:
        score -= 0.3
    elif vowels == len(upper):
        score -= 0.1
    else:
        score += 0.1 * min(vowels, 2)

    for pattern in DIFFICULT_PATTERNS:
        if pattern.search(upper):
            score -= 0.2

    if any(c in CONFUSABLE_LETTERS for c in upper):
        score -= 0.1

    for pair in SIMILAR_SOUNDING_PAIRS:
        if pair in upper:
            score -= 0.1

    return max(0.0, min(1.0, round(score, 2)))


def _strip_vowels(text: str) -> str:
    return "".join(c for c in text if c not in VOWELS)


def generate_candidates_from_name(
    name: str, exclude_club: bool = True
) -> List[Tuple[str, str]]:
    """Derive ``(suffix, derivation)`` pairs from a name, in strategy order.

    The first token is taken as the first name and the last token as the
    last name. Duplicates keep the derivation of their first occurrence.
    """
    cleaned = re.sub(r"[^A-Z\s]", "", (name or "").upper()).strip()
    parts = cleaned.split()
    if not parts:
        return []

    first = parts[0]
    last = parts[-1] if len(parts) > 1 else ""
    candidates: List[Tuple[str, str]] = []
    seen = set()

    def add(suffix: str, derivation: str) -> None:
        if not _SUFFIX_RE.match(suffix):
            return
        if exclude_club and suffix.startswith(CLUB_LETTER):
            return
        if suffix in seen:
            return
        seen.add(suffix)
        candidates.append((suffix, derivation))

    if last:
        add(first[0] + last[0], "Initials")
        if len(first) >= 2:
            add(first[:2] + last[0], "First name + initial")
        if len(last) >= 2:
            add(first[0] + last[:2], "Initial + last name")

    add(first[:2], "First name (2 letters)")
    add(first[:3], "First name (3 letters)")

    if last:
        add(last[:2], "Last name (2 letters)")
        add(last[:3], "Last name (3 letters)")

    first_consonants = _strip_vowels(first)[:3]
    add(first_consonants[:2], "First name consonants")
    add(first_consonants, "First name consonants")

    if last:
        add(_strip_vowels(last)[:2], "Last name consonants")
    if len(last) >= 2:
        add("Y" + last[:2], "Y + last name")

    for variant in PHONETIC_VARIANTS.get(first, ()):
        add(variant, f"Phonetic variant of {first}")

    return candidates


def _districts_to_check(district: Optional[int]) -> List[int]:
    return [district] if district is not None else list(ALL_DISTRICTS)


def generate_suggestions(
    store: CallsignDatabaseStore, options: SuggestOptions
) -> List[CallsignSuggestion]:
    """Ranked, available suffix suggestions for a name."""
    districts = _districts_to_check(options.preferred_district)
    suggestions = []

    for suffix, derivation in generate_candidates_from_name(options.name, options.exclude_club):
        phonetic_score = calculate_phonetic_score(suffix)
        if phonetic_score < options.min_phonetic_score:
            continue

        availability = store.check_suffix(suffix, districts)
        if not availability.available_districts:
            continue

        suggestions.append(
            CallsignSuggestion(
                suffix=suffix,
                available_districts=availability.available_districts,
                phonetic_score=phonetic_score,
                cw_score=calculate_cw_score(suffix),
                derivation=derivation,
            )
        )

    preferred = options.preferred_district
    suggestions.sort(
        key=lambda s: (
            preferred is not None and preferred not in s.available_districts,
            -s.combined_score,
        )
    )
    return suggestions[: options.max_results]


def generate_random_suggestions(
    store: CallsignDatabaseStore,
    count: int,
    district: Optional[int] = None,
    length: int = 3,
    exclude_club: bool = True,
    rng: Optional[random.Random] = None,
) -> List[CallsignSuggestion]:
    """Random available suffixes of a fixed length.

    Gives up after ``count * RANDOM_ATTEMPT_FACTOR`` attempts and returns
    whatever was found by then. Raises ``ValueError`` for a length outside
    the personal suffix range or a district outside 0-9.
    """
    min_len, max_len = SUFFIX_RULES["personal"]
    if not min_len <= length <= max_len:
        raise ValueError(f"Suffix length must be between {min_len} and {max_len}, got {length}")
    if district is not None and not is_valid_district(district):
        raise ValueError(f"Invalid district: {district}")

    rng = rng or random.Random()
    letters = string.ascii_uppercase
    if exclude_club:
        letters = letters.replace(CLUB_LETTER, "")
    districts = _districts_to_check(district)

    suggestions: List[CallsignSuggestion] = []
    tried = set()
    attempts = 0
    max_attempts = count * RANDOM_ATTEMPT_FACTOR

    while len(suggestions) < count and attempts < max_attempts:
        attempts += 1
        suffix = "".join(rng.choice(letters) for _ in range(length))
        if suffix in tried:
            continue
        tried.add(suffix)

        availability = store.check_suffix(suffix, districts)
        if not availability.available_districts:
            continue

        suggestions.append(
            CallsignSuggestion(
                suffix=suffix,
                available_districts=availability.available_districts,
                phonetic_score=calculate_phonetic_score(suffix),
                cw_score=calculate_cw_score(suffix),
                derivation=RANDOM_DERIVATION,
            )
        )

    return suggestions
