"""Parsing pipeline for the Austrian callsign list.

Line parser -> normalizer -> validator. PDF text extraction lives in
``oeradio.parser.pdf`` and is imported only by the batch job.
"""

from .build import LEGAL_NOTICE, SOURCE_URL, build_database, version_from_url
from .extract import extract_rows, extract_rows_from_text, is_noise_line, parse_callsign_line
from .normalize import (
    deduplicate_entries,
    normalize_all,
    normalize_entry,
    normalize_name,
    parse_location,
    sort_entries,
)
from .validate import generate_report, is_valid_callsign, validate_database, validate_entry

__all__ = [
    "build_database",
    "version_from_url",
    "SOURCE_URL",
    "LEGAL_NOTICE",
    "extract_rows",
    "extract_rows_from_text",
    "is_noise_line",
    "parse_callsign_line",
    "normalize_entry",
    "normalize_name",
    "parse_location",
    "normalize_all",
    "deduplicate_entries",
    "sort_entries",
    "validate_database",
    "validate_entry",
    "is_valid_callsign",
    "generate_report",
]
