"""Pydantic models for the Austrian callsign list.

The persisted database file uses camelCase keys (``licenseClass``,
``isClub``, ``parsedAt`` ...). Models therefore carry camelCase aliases
while exposing snake_case attributes in Python. Dump with
``model_dump(by_alias=True)`` to get the file/wire shape.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both field names and camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RawCallsignRow(CamelModel):
    """Tentative row produced by the line parser, never persisted."""

    callsign: str
    name: str
    location: str
    address: str
    license_class: str  # single digit as found in the source text


class CallsignRecord(CamelModel):
    """Canonical, immutable callsign list entry."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    callsign: str
    prefix: str
    district: int
    suffix: str
    name: str = ""
    qth: str = ""
    plz: str = ""
    address: str = ""
    license_class: int = 1
    is_club: bool = False
    is_hidden: bool = False


class CallsignDatabase(CamelModel):
    """Versioned collection of callsign records plus build metadata."""

    version: str
    source_url: str
    parsed_at: str
    count: int
    legal_notice: str = ""
    entries: List[CallsignRecord] = Field(default_factory=list)


class ValidationStats(CamelModel):
    """Aggregate counts collected during a validation pass."""

    total: int = 0
    by_district: Dict[int, int] = Field(default_factory=dict)
    by_license_class: Dict[int, int] = Field(default_factory=dict)
    club_stations: int = 0
    hidden_entries: int = 0
    duplicates: int = 0


class ValidationReport(CamelModel):
    """Errors block promotion of a new database; warnings never do."""

    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    stats: ValidationStats = Field(default_factory=ValidationStats)

    @property
    def passed(self) -> bool:
        return not self.errors


class DatabaseInfo(CamelModel):
    """Metadata of the currently loaded database."""

    version: str
    count: int
    parsed_at: str
    source_url: str
    legal_notice: str = ""


class DatabaseStats(CamelModel):
    """Counts over the currently loaded database."""

    total: int
    by_district: Dict[int, int]
    by_license_class: Dict[int, int]
    club_stations: int
    hidden_entries: int
