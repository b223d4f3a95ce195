"""Pydantic models returned by lookups, availability checks and suggestions."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .callsign import CallsignRecord, CamelModel

# fb = official Fernmeldebuero list, the authoritative local database
CallsignSource = Literal["fb", "qrz", "hamqth", "not_found"]


class CallsignEntry(CallsignRecord):
    """A callsign record annotated with its provenance."""

    source: CallsignSource
    last_updated: str


class LookupResult(CamelModel):
    """Outcome of a single callsign lookup."""

    exists: bool
    data: Optional[CallsignEntry] = None
    source: CallsignSource = "not_found"
    warning: Optional[str] = None


class TakenBy(CamelModel):
    """Holder of a suffix in one district."""

    district: int
    callsign: str
    name: str


class AvailabilityResult(CamelModel):
    """Which districts a suffix is free or taken in."""

    suffix: str
    available: bool
    available_districts: List[int] = Field(default_factory=list)
    taken_districts: List[int] = Field(default_factory=list)
    taken_by: List[TakenBy] = Field(default_factory=list)


class CallsignSuggestion(CamelModel):
    """A scored suffix candidate."""

    suffix: str
    available_districts: List[int]
    phonetic_score: float
    cw_score: float
    derivation: str

    @property
    def combined_score(self) -> float:
        return self.phonetic_score * 0.6 + self.cw_score * 0.4


class SuggestOptions(CamelModel):
    """Options for name based suggestion generation."""

    name: str
    preferred_district: Optional[int] = Field(default=None, ge=0, le=9)
    max_results: int = Field(default=10, ge=1, le=50)
    exclude_club: bool = True
    min_phonetic_score: float = Field(default=0.5, ge=0, le=1)


class BatchLookupRequest(BaseModel):
    """Request body for looking up several callsigns at once."""

    callsigns: List[str] = Field(..., min_length=1, max_length=50)
    local_only: bool = False


class AvailabilityRequest(BaseModel):
    """Request body for checking several suffixes at once."""

    suffixes: List[str] = Field(..., min_length=1, max_length=100)
    district: Optional[int] = Field(default=None, ge=0, le=9)
