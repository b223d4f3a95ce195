"""Lookup sources for the callsign fallback chain.

Every source implements the same small contract: ``name``,
``is_configured()`` and ``async attempt(callsign) -> LookupResult``. The
lookup engine queries them in order and stops at the first hit.
"""

from __future__ import annotations

import asyncio
import re
import time
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Protocol

import httpx

from oeradio.adapters.database import CallsignDatabaseStore
from oeradio.models.lookup import CallsignEntry, CallsignSource as SourceTag, LookupResult
from oeradio.rules import CLUB_LETTER, PREFIX

# Sent as agent/program identifier to the XML services
AGENT = "oeradio-mcp-1.0"

EXTERNAL_CALLSIGN_RE = re.compile(r"^(OE)(\d)([A-Z]{1,4})$", re.IGNORECASE)


class ExternalSourceError(Exception):
    """Raised for unusable responses from an external lookup service."""


class CallsignSource(Protocol):
    """Uniform contract of a source in the lookup chain."""

    name: str

    def is_configured(self) -> bool:
        ...

    async def attempt(self, callsign: str) -> LookupResult:
        ...


def not_found(warning: Optional[str] = None) -> LookupResult:
    return LookupResult(exists=False, source="not_found", warning=warning)


class LocalSource:
    """The official list loaded from the local database file."""

    name = "fb"

    def __init__(self, store: CallsignDatabaseStore) -> None:
        self.store = store

    def is_configured(self) -> bool:
        return True

    async def attempt(self, callsign: str) -> LookupResult:
        record = self.store.find(callsign)
        if record is None:
            return not_found()
        entry = CallsignEntry(
            **record.model_dump(),
            source="fb",
            last_updated=self.store.load().parsed_at,
        )
        return LookupResult(exists=True, data=entry, source="fb")


class RateLimiter:
    """Minimum-interval gate between consecutive requests to one service."""

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        async with self._lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                if elapsed < self.min_interval:
                    await self._sleep(self.min_interval - elapsed)
            self._last_request = self._clock()


def xml_value(root: ET.Element, tag: str) -> Optional[str]:
    """Text of the first element named ``tag``, ignoring namespace and case."""
    wanted = tag.lower()
    for element in root.iter():
        local = element.tag.rsplit("}", 1)[-1].lower()
        if local == wanted:
            text = (element.text or "").strip()
            return text or None
    return None


def parse_xml(content: bytes) -> ET.Element:
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise ExternalSourceError(f"Malformed XML response: {e}") from e


def external_entry(
    callsign: str,
    source: SourceTag,
    name: str = "",
    qth: str = "",
    plz: str = "",
    address: str = "",
    license_class: int = 1,
) -> CallsignEntry:
    """Map an external hit onto the canonical entry shape."""
    callsign = callsign.upper()
    match = EXTERNAL_CALLSIGN_RE.match(callsign)
    if match:
        prefix, district, suffix = PREFIX, int(match.group(2)), match.group(3).upper()
    else:
        prefix, district, suffix = callsign[:2], 0, ""
    return CallsignEntry(
        callsign=callsign,
        prefix=prefix,
        district=district,
        suffix=suffix,
        name=name,
        qth=qth,
        plz=plz,
        address=address,
        license_class=license_class,
        is_club=bool(suffix) and suffix.startswith(CLUB_LETTER),
        is_hidden=False,
        source=source,
        last_updated=datetime.now(timezone.utc).isoformat(),
    )


class XmlApiSource:
    """Shared HTTP plumbing for the XML callsign services."""

    name = "not_found"
    label = "external source"
    base_url = ""

    def __init__(
        self,
        timeout: float = 10,
        min_interval: float = 1.0,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self._client = client
        self._clock = clock
        self._rate_limiter = RateLimiter(min_interval, clock=clock)

    async def _request(self, params: dict) -> ET.Element:
        await self._rate_limiter.wait()
        if self._client is not None:
            response = await self._client.get(self.base_url, params=params, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(self.base_url, params=params)
        if response.status_code != 200:
            raise ExternalSourceError(f"{self.label} HTTP {response.status_code}")
        return parse_xml(response.content)
