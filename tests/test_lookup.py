"""Tests for the lookup engine: fallback order, warnings and caching."""

import asyncio
from typing import List, Optional

import pytest

from oeradio.adapters.database import CallsignDatabaseMissingError, CallsignDatabaseStore
from oeradio.adapters.lookup import LOOKUP_CONCURRENCY, CallsignLookupEngine
from oeradio.adapters.sources import LocalSource, external_entry
from oeradio.models.lookup import LookupResult

from conftest import FakeClock


class MockSource:
    """Source returning canned results and counting calls."""

    def __init__(
        self,
        name: str,
        hits: Optional[List[str]] = None,
        configured: bool = True,
        warning: Optional[str] = None,
    ) -> None:
        self.name = name
        self.hits = set(hits or [])
        self.configured = configured
        self.warning = warning
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def is_configured(self) -> bool:
        return self.configured

    async def attempt(self, callsign: str) -> LookupResult:
        self.calls.append(callsign)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        if callsign in self.hits:
            entry = external_entry(callsign, source=self.name, name="Test Operator")
            return LookupResult(exists=True, data=entry, source=self.name)
        return LookupResult(exists=False, source="not_found", warning=self.warning)


@pytest.fixture
def qrz() -> MockSource:
    return MockSource("qrz", hits=["OE9QRZ", "DL1ABC"])


@pytest.fixture
def hamqth() -> MockSource:
    return MockSource("hamqth", hits=["OE9HQ", "OK1RR"])


@pytest.fixture
def engine(
    store: CallsignDatabaseStore, qrz: MockSource, hamqth: MockSource, clock: FakeClock
) -> CallsignLookupEngine:
    return CallsignLookupEngine(LocalSource(store), [qrz, hamqth], cache_ttl=3600, clock=clock)


class TestFallbackChain:
    """Tests for source order and result annotation."""

    def test_local_hit(self, engine: CallsignLookupEngine, qrz: MockSource) -> None:
        """Test the official list answers first."""
        result = asyncio.run(engine.lookup("oe1abc"))
        assert result.exists
        assert result.source == "fb"
        assert result.data is not None
        assert result.data.name == "Hans Muster"
        assert result.data.last_updated == "2025-07-02T08:00:00+00:00"
        assert result.warning is None
        assert qrz.calls == []

    def test_local_hidden_entry(self, engine: CallsignLookupEngine) -> None:
        """Test hidden entries are returned without personal data."""
        result = asyncio.run(engine.lookup("OE3ABC"))
        assert result.exists
        assert result.data is not None
        assert result.data.is_hidden
        assert result.data.name == ""

    def test_external_oe_hit_has_warning(
        self, engine: CallsignLookupEngine, hamqth: MockSource
    ) -> None:
        """Test Austrian calls only known externally are flagged."""
        result = asyncio.run(engine.lookup("OE9QRZ"))
        assert result.exists
        assert result.source == "qrz"
        assert "QRZ.com" in result.warning
        assert "NOT in the official Austrian list" in result.warning
        assert hamqth.calls == []

    def test_second_source(self, engine: CallsignLookupEngine, qrz: MockSource) -> None:
        """Test the second external source is reached after a miss."""
        result = asyncio.run(engine.lookup("OE9HQ"))
        assert result.source == "hamqth"
        assert "HamQTH" in result.warning
        assert qrz.calls == ["OE9HQ"]

    def test_foreign_hit_has_no_warning(self, engine: CallsignLookupEngine) -> None:
        """Test non-Austrian calls found externally are not flagged."""
        result = asyncio.run(engine.lookup("DL1ABC"))
        assert result.exists
        assert result.warning is None
        assert result.data is not None
        assert result.data.prefix == "DL"

    def test_not_found(
        self, engine: CallsignLookupEngine, qrz: MockSource, hamqth: MockSource
    ) -> None:
        """Test a miss everywhere."""
        result = asyncio.run(engine.lookup("OE2NONE"))
        assert not result.exists
        assert result.source == "not_found"
        assert result.warning is None
        assert qrz.calls == ["OE2NONE"]
        assert hamqth.calls == ["OE2NONE"]

    def test_invalid_query(
        self, engine: CallsignLookupEngine, qrz: MockSource, hamqth: MockSource
    ) -> None:
        """Test malformed queries never reach a source."""
        for query in ("A!", "OE", "OE1ABCDEFGHIJ", ""):
            result = asyncio.run(engine.lookup(query))
            assert not result.exists
            assert result.warning == "Invalid callsign format"
        assert qrz.calls == []
        assert hamqth.calls == []

    def test_unconfigured_source_skipped(self, store: CallsignDatabaseStore) -> None:
        """Test sources without credentials are not queried."""
        qrz = MockSource("qrz", hits=["OE9QRZ"], configured=False)
        engine = CallsignLookupEngine(LocalSource(store), [qrz])
        result = asyncio.run(engine.lookup("OE9QRZ"))
        assert not result.exists
        assert qrz.calls == []

    def test_failure_warnings_joined(self, store: CallsignDatabaseStore) -> None:
        """Test failed sources leave their warnings on the miss."""
        qrz = MockSource("qrz", warning="QRZ.com lookup failed: timeout")
        hamqth = MockSource("hamqth", warning="HamQTH lookup failed: HTTP 500")
        engine = CallsignLookupEngine(LocalSource(store), [qrz, hamqth])
        result = asyncio.run(engine.lookup("OE2NONE"))
        assert not result.exists
        assert result.warning == "QRZ.com lookup failed: timeout; HamQTH lookup failed: HTTP 500"

    def test_local_only(self, engine: CallsignLookupEngine, qrz: MockSource) -> None:
        """Test external sources are skipped and the miss is not cached."""
        result = asyncio.run(engine.lookup("OE9QRZ", local_only=True))
        assert not result.exists
        assert qrz.calls == []

        result = asyncio.run(engine.lookup("OE9QRZ"))
        assert result.exists
        assert qrz.calls == ["OE9QRZ"]

    def test_missing_database_propagates(self, missing_store: CallsignDatabaseStore) -> None:
        """Test a missing database is fatal, not a miss."""
        engine = CallsignLookupEngine(LocalSource(missing_store), [])
        with pytest.raises(CallsignDatabaseMissingError):
            asyncio.run(engine.lookup("OE1ABC"))


class TestCache:
    """Tests for the lookup result cache."""

    def test_second_query_served_from_cache(
        self, engine: CallsignLookupEngine, qrz: MockSource, clock: FakeClock
    ) -> None:
        """Test identical queries within the TTL call the source once."""
        asyncio.run(engine.lookup("OE9QRZ"))
        clock.advance(60)
        result = asyncio.run(engine.lookup("oe9qrz"))
        assert result.exists
        assert qrz.calls == ["OE9QRZ"]

    def test_expired_entry_resolved_again(
        self, engine: CallsignLookupEngine, qrz: MockSource, clock: FakeClock
    ) -> None:
        """Test a query after the TTL triggers fresh resolution."""
        asyncio.run(engine.lookup("OE9QRZ"))
        asyncio.run(engine.lookup("OE9QRZ"))
        clock.advance(3601)
        asyncio.run(engine.lookup("OE9QRZ"))
        assert qrz.calls == ["OE9QRZ", "OE9QRZ"]

    def test_negative_results_cached(
        self, engine: CallsignLookupEngine, qrz: MockSource, hamqth: MockSource
    ) -> None:
        """Test misses are cached too."""
        asyncio.run(engine.lookup("OE2NONE"))
        asyncio.run(engine.lookup("OE2NONE"))
        assert qrz.calls == ["OE2NONE"]
        assert hamqth.calls == ["OE2NONE"]

    def test_skip_cache(self, engine: CallsignLookupEngine, qrz: MockSource) -> None:
        """Test skip_cache bypasses a cached result."""
        asyncio.run(engine.lookup("OE9QRZ"))
        asyncio.run(engine.lookup("OE9QRZ", skip_cache=True))
        assert qrz.calls == ["OE9QRZ", "OE9QRZ"]

    def test_disabled_cache(self, engine: CallsignLookupEngine, qrz: MockSource) -> None:
        """Test configure(cache_enabled=False) empties and disables the cache."""
        asyncio.run(engine.lookup("OE9QRZ"))
        engine.configure(cache_enabled=False)
        assert engine.cache_stats()["size"] == 0
        asyncio.run(engine.lookup("OE9QRZ"))
        asyncio.run(engine.lookup("OE9QRZ"))
        assert len(qrz.calls) == 3

    def test_clear_and_stats(self, engine: CallsignLookupEngine) -> None:
        """Test cache statistics and clearing."""
        asyncio.run(engine.lookup("OE1ABC"))
        asyncio.run(engine.lookup("OE2NONE"))
        assert engine.cache_stats() == {"size": 2, "enabled": True, "ttl": 3600}
        engine.clear_cache()
        assert engine.cache_stats()["size"] == 0

    def test_configure_ttl(
        self, engine: CallsignLookupEngine, qrz: MockSource, clock: FakeClock
    ) -> None:
        """Test a shorter TTL applies to existing entries."""
        asyncio.run(engine.lookup("OE9QRZ"))
        engine.configure(cache_ttl=10)
        clock.advance(11)
        asyncio.run(engine.lookup("OE9QRZ"))
        assert len(qrz.calls) == 2


class TestLookupMultiple:
    """Tests for batch lookups."""

    def test_results_keyed_by_normalized_callsign(self, engine: CallsignLookupEngine) -> None:
        """Test the mapping result."""
        results = asyncio.run(engine.lookup_multiple(["oe1abc", "OE9QRZ ", "OE2NONE"]))
        assert set(results) == {"OE1ABC", "OE9QRZ", "OE2NONE"}
        assert results["OE1ABC"].source == "fb"
        assert results["OE9QRZ"].source == "qrz"
        assert not results["OE2NONE"].exists

    def test_concurrency_bound(self, store: CallsignDatabaseStore) -> None:
        """Test at most LOOKUP_CONCURRENCY lookups are in flight."""
        qrz = MockSource("qrz")
        engine = CallsignLookupEngine(LocalSource(store), [qrz])
        callsigns = [f"OE2N{chr(ord('A') + i)}" for i in range(12)]
        results = asyncio.run(engine.lookup_multiple(callsigns))
        assert len(results) == 12
        assert len(qrz.calls) == 12
        assert 1 < qrz.max_in_flight <= LOOKUP_CONCURRENCY
