"""HamQTH.com XML lookup; works anonymously or with a login session."""

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

HAMQTH_SESSION_LIFETIME = 55 * 60  # seconds, sessions expire after 1h


class HamQTHSource(XmlApiSource):
    """Lookup against hamqth.com/xml.php."""

    name = "hamqth"
    label = "HamQTH"
    base_url = "https://www.hamqth.com/xml.php"

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
        self._session_id: Optional[str] = None
        self._session_expires = 0.0

    def is_configured(self) -> bool:
        # Anonymous lookups need no credentials
        return True

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def invalidate_session(self) -> None:
        self._session_id = None
        self._session_expires = 0.0

    async def _get_session(self) -> Optional[str]:
        if not self.has_credentials:
            return None
        if self._session_id and self._clock() < self._session_expires:
            return self._session_id

        root = await self._request({"u": self.username, "p": self.password})
        error = xml_value(root, "error")
        if error:
            log_error("hamqth_login_failed", error=error)
            return None

        session_id = xml_value(root, "session_id")
        if not session_id:
            return None

        self._session_id = session_id
        self._session_expires = self._clock() + HAMQTH_SESSION_LIFETIME
        log_info("hamqth_session_created")
        return session_id

    async def attempt(self, callsign: str) -> LookupResult:
        try:
            return await self._lookup(callsign, retry=True)
        except (httpx.HTTPError, ExternalSourceError) as e:
            log_error("hamqth_lookup_error", callsign=callsign, error=str(e))
            return not_found(f"HamQTH lookup failed: {e}")

    async def _lookup(self, callsign: str, retry: bool) -> LookupResult:
        session = await self._get_session()
        params = {"callsign": callsign, "prg": AGENT}
        if session:
            params["id"] = session

        root = await self._request(params)
        error = xml_value(root, "error")
        if error:
            lowered = error.lower()
            if "not found" in lowered or "callsign" in lowered:
                return not_found()
            if session and "session" in lowered:
                self.invalidate_session()
                if retry:
                    return await self._lookup(callsign, retry=False)
            return not_found(f"HamQTH error: {error}")

        found = xml_value(root, "callsign")
        if not found:
            return not_found()

        entry = external_entry(
            found,
            source="hamqth",
            name=xml_value(root, "nick") or xml_value(root, "adr_name") or "",
            qth=xml_value(root, "qth") or xml_value(root, "adr_city") or "",
            plz=xml_value(root, "adr_zip") or "",
            address=xml_value(root, "adr_street1") or "",
        )
        return LookupResult(exists=True, data=entry, source="hamqth")
