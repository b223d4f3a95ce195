"""Pydantic models for callsign and suffix format validation."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ParsedCallsign(BaseModel):
    """Structural parts of an Austrian callsign."""

    prefix: str
    district: int
    suffix: str


class CallsignValidation(BaseModel):
    """Result of validating a callsign against Austrian rules."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    parsed: Optional[ParsedCallsign] = None


class SuffixValidation(BaseModel):
    """Result of validating a bare suffix."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
