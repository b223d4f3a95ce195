"""Shared fixtures for the callsign tests."""

from pathlib import Path
from typing import List

import pytest

from oeradio.adapters.database import CallsignDatabaseStore
from oeradio.models.callsign import CallsignDatabase, CallsignRecord


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_record(callsign: str, name: str = "Hans Muster", **overrides) -> CallsignRecord:
    """Build a consistent record from a callsign like ``OE1ABC``."""
    suffix = callsign[3:]
    fields = dict(
        callsign=callsign,
        prefix="OE",
        district=int(callsign[2]),
        suffix=suffix,
        name=name,
        qth="Wien",
        plz="1010",
        address="Hauptstraße 1",
        license_class=1,
        is_club=suffix.startswith("X"),
        is_hidden=False,
    )
    fields.update(overrides)
    return CallsignRecord(**fields)


def make_hidden_record(callsign: str) -> CallsignRecord:
    return make_record(callsign, name="", qth="", plz="", address="", is_hidden=True)


def make_database(entries: List[CallsignRecord]) -> CallsignDatabase:
    return CallsignDatabase(
        version="2025-07-01",
        source_url="https://www.fb.gv.at/Rufzeichenliste_AT_Stand_010725.pdf",
        parsed_at="2025-07-02T08:00:00+00:00",
        count=len(entries),
        legal_notice="Nur für Amateurfunkzwecke.",
        entries=entries,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock for TTL tests."""
    return FakeClock()


@pytest.fixture
def sample_entries() -> List[CallsignRecord]:
    """A handful of records across districts, including hidden and club."""
    return [
        make_record("OE1ABC", "Hans Muster"),
        make_record("OE1XYZ", "Radioklub Wien"),
        make_hidden_record("OE3ABC"),
        make_record("OE5ABC", "Karl Maier", qth="Linz", plz="4020", license_class=3),
        make_record("OE8YML", "Max Lechner", qth="Klagenfurt", plz="9020", license_class=4),
    ]


@pytest.fixture
def database_path(tmp_path: Path, sample_entries: List[CallsignRecord]) -> Path:
    """Database file written to a temporary directory."""
    path = tmp_path / "callsigns_oe.json"
    CallsignDatabaseStore(path).save(make_database(sample_entries))
    return path


@pytest.fixture
def store(database_path: Path) -> CallsignDatabaseStore:
    """Store backed by the sample database."""
    return CallsignDatabaseStore(database_path)


@pytest.fixture
def missing_store(tmp_path: Path) -> CallsignDatabaseStore:
    """Store pointing at a file that does not exist."""
    return CallsignDatabaseStore(tmp_path / "missing.json")
