"""QRZ.com XML data service lookup (subscription required)."""

from __future__ import annotations

import time
from typing import Callable, Optional

import httpx

from oeradio.adapters.sources import (
    AGENT,
    ExternalSourceError,
    XmlApiSource,
    external_entry,
    not_found,
    xml_value,
)
from oeradio.middleware.logging import log_error, log_info
from oeradio.models.lookup import LookupResult

QRZ_SESSION_LIFETIME = 23 * 3600  # seconds, QRZ keys live ~24h


def qrz_license_class(raw: Optional[str]) -> int:
    """Map the free-text QRZ class field onto 1, 3 or 4."""
    text = (raw or "").lower()
    if "novice" in text or "einsteiger" in text:
        return 4
    if "3" in text or "eingeschr" in text:
        return 3
    return 1


class QRZSource(XmlApiSource):
    """Lookup against xmldata.qrz.com with a cached session key."""

    name = "qrz"
    label = "QRZ.com"
    base_url = "https://xmldata.qrz.com/xml/current/"

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10,
        min_interval: float = 1.0,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(timeout=timeout, min_interval=min_interval, client=client, clock=clock)
        self.username = username
        self.password = password
        self._session_key: Optional[str] = None
        self._session_expires = 0.0

    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    def invalidate_session(self) -> None:
        self._session_key = None
        self._session_expires = 0.0

    async def _get_session(self) -> Optional[str]:
        if self._session_key and self._clock() < self._session_expires:
            return self._session_key

        root = await self._request(
            {"username": self.username, "password": self.password, "agent": AGENT}
        )
        error = xml_value(root, "Error")
        if error:
            log_error("qrz_login_failed", error=error)
            return None

        key = xml_value(root, "Key")
        if not key:
            log_error("qrz_login_failed", error="no session key in response")
            return None

        self._session_key = key
        self._session_expires = self._clock() + QRZ_SESSION_LIFETIME
        log_info("qrz_session_created")
        return key

    async def attempt(self, callsign: str) -> LookupResult:
        if not self.is_configured():
            return not_found()
        try:
            return await self._lookup(callsign, retry=True)
        except (httpx.HTTPError, ExternalSourceError) as e:
            log_error("qrz_lookup_error", callsign=callsign, error=str(e))
            return not_found(f"QRZ.com lookup failed: {e}")

    async def _lookup(self, callsign: str, retry: bool) -> LookupResult:
        session = await self._get_session()
        if not session:
            return not_found("QRZ.com authentication failed - check credentials")

        root = await self._request({"s": session, "callsign": callsign})
        error = xml_value(root, "Error")
        if error:
            lowered = error.lower()
            if "not found" in lowered:
                return not_found()
            if "session" in lowered or "invalid" in lowered:
                self.invalidate_session()
                if retry:
                    return await self._lookup(callsign, retry=False)
            return not_found(f"QRZ.com error: {error}")

        found = xml_value(root, "call")
        if not found:
            return not_found()

        first = xml_value(root, "fname") or ""
        last = xml_value(root, "name") or ""
        entry = external_entry(
            found,
            source="qrz",
            name=f"{first} {last}".strip(),
            qth=xml_value(root, "addr2") or "",
            plz=xml_value(root, "zip") or "",
            address=xml_value(root, "addr1") or "",
            license_class=qrz_license_class(xml_value(root, "class")),
        )
        return LookupResult(exists=True, data=entry, source="qrz")
