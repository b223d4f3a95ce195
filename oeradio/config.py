"""Runtime configuration for the callsign service.

Values come from environment variables so the service can run unchanged
in a container or locally. Unset credentials simply disable the
corresponding external lookup source.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


class CallsignConfig(BaseModel):
    """Configuration for the callsign database, lookups and caches."""

    data_path: str = "data/callsigns_oe.json"
    qrz_username: Optional[str] = None
    qrz_password: Optional[str] = None
    hamqth_username: Optional[str] = None
    hamqth_password: Optional[str] = None
    cache_enabled: bool = True
    cache_ttl: float = 3600  # seconds, lookup result cache
    database_cache_ttl: float = 300  # seconds, database snapshot cache
    request_timeout: float = 10  # seconds, external sources
    min_request_interval: float = 1.0  # seconds between requests per source

    @classmethod
    def from_env(cls) -> "CallsignConfig":
        """Build a configuration from environment variables."""
        return cls(
            data_path=os.getenv("OERADIO_DATA_PATH", "data/callsigns_oe.json"),
            qrz_username=os.getenv("QRZ_USERNAME") or None,
            qrz_password=os.getenv("QRZ_PASSWORD") or None,
            hamqth_username=os.getenv("HAMQTH_USERNAME") or None,
            hamqth_password=os.getenv("HAMQTH_PASSWORD") or None,
            cache_enabled=_env_bool("CALLSIGN_CACHE_ENABLED", True),
            cache_ttl=_env_float("CALLSIGN_CACHE_TTL", 3600),
            database_cache_ttl=_env_float("CALLSIGN_DB_CACHE_TTL", 300),
            request_timeout=_env_float("CALLSIGN_REQUEST_TIMEOUT", 10),
        )
