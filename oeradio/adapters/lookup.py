"""Callsign lookup with source fallback and a TTL result cache.

Order: local official list (fb.gv.at), then every configured external
source. The first hit wins. Austrian callsigns that are only known to an
external source get a warning, since they are not in the official list.
"""

from __future__ import annotations

import asyncio
import re
import time
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from oeradio.adapters.sources import CallsignSource, not_found
from oeradio.middleware.logging import log_info
from oeradio.models.lookup import LookupResult
from oeradio.rules import PREFIX, normalize

LOOKUP_CONCURRENCY = 5
QUERY_RE = re.compile(r"^[A-Z0-9]{3,10}$")

SOURCE_LABELS = {"qrz": "QRZ.com", "hamqth": "HamQTH"}

UNLISTED_WARNING = (
    "Callsign found in {source} but NOT in the official Austrian list "
    "(fb.gv.at). Possibly unlicensed operation, an expired license or "
    "stale {source} data."
)


class CallsignLookupEngine:
    """Resolve callsigns across the local database and external sources."""

    def __init__(
        self,
        local: CallsignSource,
        external_sources: Sequence[CallsignSource] = (),
        cache_enabled: bool = True,
        cache_ttl: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.local = local
        self.external_sources: List[CallsignSource] = list(external_sources)
        self.cache_enabled = cache_enabled
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._cache: Dict[str, Tuple[LookupResult, float]] = {}

    def configure(
        self,
        cache_enabled: Optional[bool] = None,
        cache_ttl: Optional[float] = None,
        external_sources: Optional[Sequence[CallsignSource]] = None,
    ) -> None:
        """Change settings at runtime; disabling the cache empties it."""
        if cache_enabled is not None:
            self.cache_enabled = cache_enabled
            if not cache_enabled:
                self._cache.clear()
        if cache_ttl is not None:
            self.cache_ttl = cache_ttl
        if external_sources is not None:
            self.external_sources = list(external_sources)

    def _get_cached(self, key: str) -> Optional[LookupResult]:
        if not self.cache_enabled:
            return None
        cached = self._cache.get(key)
        if cached is None:
            return None
        result, stored_at = cached
        if self._clock() - stored_at > self.cache_ttl:
            del self._cache[key]
            return None
        return result

    def _set_cached(self, key: str, result: LookupResult) -> None:
        if self.cache_enabled:
            self._cache[key] = (result, self._clock())

    async def lookup(
        self, callsign: str, skip_cache: bool = False, local_only: bool = False
    ) -> LookupResult:
        """Look up one callsign.

        Args:
            callsign: Callsign in any case, surrounding whitespace allowed.
            skip_cache: Ignore a cached result (the fresh one is still stored).
            local_only: Consult only the official list.
        """
        key = normalize(callsign)
        if not QUERY_RE.match(key):
            return not_found("Invalid callsign format")

        if not skip_cache:
            cached = self._get_cached(key)
            if cached is not None:
                return cached

        result = await self.local.attempt(key)
        if result.exists:
            self._set_cached(key, result)
            return result

        if local_only:
            return result

        warnings: List[str] = []
        for source in self.external_sources:
            if not source.is_configured():
                continue
            result = await source.attempt(key)
            if result.exists:
                if key.startswith(PREFIX):
                    label = SOURCE_LABELS.get(source.name, source.name)
                    result = result.model_copy(
                        update={"warning": UNLISTED_WARNING.format(source=label)}
                    )
                log_info("callsign_found_external", callsign=key, source=source.name)
                self._set_cached(key, result)
                return result
            if result.warning:
                warnings.append(result.warning)

        result = not_found("; ".join(warnings) or None)
        self._set_cached(key, result)
        return result

    async def lookup_multiple(
        self,
        callsigns: Iterable[str],
        skip_cache: bool = False,
        local_only: bool = False,
    ) -> Dict[str, LookupResult]:
        """Look up several callsigns, at most ``LOOKUP_CONCURRENCY`` at a time."""
        pending = list(callsigns)
        results: Dict[str, LookupResult] = {}
        for i in range(0, len(pending), LOOKUP_CONCURRENCY):
            batch = pending[i : i + LOOKUP_CONCURRENCY]
            batch_results = await asyncio.gather(
                *(self.lookup(cs, skip_cache=skip_cache, local_only=local_only) for cs in batch)
            )
            for cs, result in zip(batch, batch_results):
                results[normalize(cs)] = result
        return results

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> Dict[str, object]:
        return {
            "size": len(self._cache),
            "enabled": self.cache_enabled,
            "ttl": self.cache_ttl,
        }
