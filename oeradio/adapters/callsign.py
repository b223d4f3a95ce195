"""Callsign service facade used by the HTTP and MCP surfaces.

Wires the local database store, the external lookup sources and the
lookup engine from a ``CallsignConfig`` and exposes every serving
operation in one place.
"""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional

from oeradio.adapters.availability import (
    check_availability,
    check_multiple_availability,
    find_available_two_letter_suffixes,
)
from oeradio.adapters.database import CallsignDatabaseStore
from oeradio.adapters.hamqth import HamQTHSource
from oeradio.adapters.lookup import CallsignLookupEngine
from oeradio.adapters.qrz import QRZSource
from oeradio.adapters.sources import LocalSource
from oeradio.adapters.suggest import generate_random_suggestions, generate_suggestions
from oeradio.config import CallsignConfig
from oeradio.middleware.logging import log_info
from oeradio.models.callsign import CallsignRecord, DatabaseInfo, DatabaseStats
from oeradio.models.lookup import (
    AvailabilityResult,
    CallsignSuggestion,
    LookupResult,
    SuggestOptions,
)
from oeradio.models.rules import CallsignValidation
from oeradio.rules import validate_callsign


class CallsignAdapter:
    """Adapter for Austrian callsign lookups, availability and suggestions."""

    def __init__(self, config: Optional[CallsignConfig] = None):
        self.config = config or CallsignConfig()
        self.store = CallsignDatabaseStore(
            self.config.data_path, ttl=self.config.database_cache_ttl
        )
        self.qrz = QRZSource(
            self.config.qrz_username,
            self.config.qrz_password,
            timeout=self.config.request_timeout,
            min_interval=self.config.min_request_interval,
        )
        self.hamqth = HamQTHSource(
            self.config.hamqth_username,
            self.config.hamqth_password,
            timeout=self.config.request_timeout,
            min_interval=self.config.min_request_interval,
        )
        self.engine = CallsignLookupEngine(
            LocalSource(self.store),
            [self.qrz, self.hamqth],
            cache_enabled=self.config.cache_enabled,
            cache_ttl=self.config.cache_ttl,
        )

    async def lookup(
        self, callsign: str, skip_cache: bool = False, local_only: bool = False
    ) -> LookupResult:
        return await self.engine.lookup(callsign, skip_cache=skip_cache, local_only=local_only)

    async def lookup_multiple(
        self, callsigns: Iterable[str], local_only: bool = False
    ) -> Dict[str, LookupResult]:
        return await self.engine.lookup_multiple(callsigns, local_only=local_only)

    def check_availability(self, suffix: str, district: Optional[int] = None) -> AvailabilityResult:
        return check_availability(self.store, suffix, district)

    def check_multiple_availability(
        self, suffixes: Iterable[str], district: Optional[int] = None
    ) -> Dict[str, AvailabilityResult]:
        return check_multiple_availability(self.store, suffixes, district)

    def find_available_two_letter_suffixes(
        self, district: int, exclude_club: bool = False, club_only: bool = False
    ) -> List[str]:
        return find_available_two_letter_suffixes(
            self.store, district, exclude_club=exclude_club, club_only=club_only
        )

    def generate_suggestions(self, options: SuggestOptions) -> List[CallsignSuggestion]:
        return generate_suggestions(self.store, options)

    def generate_random_suggestions(
        self,
        count: int,
        district: Optional[int] = None,
        length: int = 3,
        exclude_club: bool = True,
        rng: Optional[random.Random] = None,
    ) -> List[CallsignSuggestion]:
        return generate_random_suggestions(
            self.store, count, district=district, length=length, exclude_club=exclude_club, rng=rng
        )

    def validate(self, callsign: str) -> CallsignValidation:
        """Format check only; does not consult the database."""
        return validate_callsign(callsign)

    def search(
        self,
        pattern: str,
        district: Optional[int] = None,
        license_class: Optional[int] = None,
        club_only: bool = False,
        limit: int = 50,
    ) -> List[CallsignRecord]:
        return self.store.search(
            pattern, district=district, license_class=license_class, club_only=club_only, limit=limit
        )

    def get_database_info(self) -> DatabaseInfo:
        return self.store.info()

    def get_database_stats(self) -> DatabaseStats:
        return self.store.stats()

    def reload(self) -> None:
        """Drop the database snapshot and every cached lookup."""
        self.store.invalidate()
        self.engine.clear_cache()
        log_info("callsign_adapter_reloaded", path=str(self.store.path))


# Global adapter instance
_callsign_adapter = None


def get_callsign_adapter() -> CallsignAdapter:
    """Get or create the global callsign adapter instance."""
    global _callsign_adapter
    if _callsign_adapter is None:
        _callsign_adapter = CallsignAdapter(CallsignConfig.from_env())
    return _callsign_adapter


def reset_callsign_adapter(adapter: Optional[CallsignAdapter] = None) -> None:
    """Replace (or drop) the global adapter instance."""
    global _callsign_adapter
    _callsign_adapter = adapter
