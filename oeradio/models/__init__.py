"""Model exports."""

from .callsign import (
    CallsignDatabase,
    CallsignRecord,
    DatabaseInfo,
    DatabaseStats,
    RawCallsignRow,
    ValidationReport,
    ValidationStats,
)
from .lookup import (
    AvailabilityRequest,
    AvailabilityResult,
    BatchLookupRequest,
    CallsignEntry,
    CallsignSource,
    CallsignSuggestion,
    LookupResult,
    SuggestOptions,
    TakenBy,
)
from .rules import CallsignValidation, ParsedCallsign, SuffixValidation

__all__ = [
    "RawCallsignRow",
    "CallsignRecord",
    "CallsignDatabase",
    "ValidationStats",
    "ValidationReport",
    "DatabaseInfo",
    "DatabaseStats",
    "CallsignEntry",
    "CallsignSource",
    "LookupResult",
    "TakenBy",
    "AvailabilityResult",
    "AvailabilityRequest",
    "BatchLookupRequest",
    "CallsignSuggestion",
    "SuggestOptions",
    "ParsedCallsign",
    "CallsignValidation",
    "SuffixValidation",
]
