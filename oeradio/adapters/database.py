"""Local store for the official Austrian callsign list.

The database is a single JSON document written by
``scripts/update_callsigns.py``. The serving side only reads it and keeps
a short-lived in-memory snapshot so that a freshly promoted file becomes
visible without a restart.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from oeradio.middleware.logging import log_error, log_info
from oeradio.models.callsign import (
    CallsignDatabase,
    CallsignRecord,
    DatabaseInfo,
    DatabaseStats,
)
from oeradio.models.lookup import AvailabilityResult, TakenBy
from oeradio.rules import ALL_DISTRICTS, HIDDEN_DISPLAY_NAME, build_callsign, normalize

DEFAULT_DATABASE_TTL = 300  # seconds


class CallsignDatabaseError(Exception):
    """Raised when the database file cannot be read or parsed."""


class CallsignDatabaseMissingError(CallsignDatabaseError):
    """Raised when no database file exists; nothing can be answered."""


class CallsignDatabaseStore:
    """File backed callsign database with a TTL snapshot cache."""

    def __init__(
        self,
        path: str | Path,
        ttl: float = DEFAULT_DATABASE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path = Path(path)
        self.ttl = ttl
        self._clock = clock
        self._database: Optional[CallsignDatabase] = None
        self._index: Dict[str, CallsignRecord] = {}
        self._loaded_at = 0.0

    def load(self) -> CallsignDatabase:
        """Return the current snapshot, re-reading the file once it is stale."""
        now = self._clock()
        if self._database is not None and now - self._loaded_at < self.ttl:
            return self._database

        if not self.path.exists():
            raise CallsignDatabaseMissingError(
                f"Callsign database not found at {self.path}. "
                "Run scripts/update_callsigns.py first."
            )

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                database = CallsignDatabase.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            log_error("callsign_database_load_error", path=str(self.path), error=str(e))
            raise CallsignDatabaseError(f"Callsign database at {self.path} is unreadable: {e}") from e

        self._database = database
        self._index = {entry.callsign: entry for entry in database.entries}
        self._loaded_at = now
        log_info(
            "callsign_database_loaded",
            path=str(self.path),
            version=database.version,
            entries=len(database.entries),
        )
        return database

    def save(self, database: CallsignDatabase) -> None:
        """Write the database atomically and drop the cached snapshot."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = database.model_dump(by_alias=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        self.invalidate()

    def invalidate(self) -> None:
        """Forget the cached snapshot so the next access re-reads the file."""
        self._database = None
        self._index = {}
        self._loaded_at = 0.0

    def find(self, callsign: str) -> Optional[CallsignRecord]:
        """Exact match on the callsign key."""
        self.load()
        return self._index.get(normalize(callsign))

    def info(self) -> DatabaseInfo:
        db = self.load()
        return DatabaseInfo(
            version=db.version,
            count=db.count,
            parsed_at=db.parsed_at,
            source_url=db.source_url,
            legal_notice=db.legal_notice,
        )

    def stats(self) -> DatabaseStats:
        db = self.load()
        by_district: Dict[int, int] = {}
        by_license_class: Dict[int, int] = {}
        club_stations = 0
        hidden_entries = 0
        for entry in db.entries:
            by_district[entry.district] = by_district.get(entry.district, 0) + 1
            by_license_class[entry.license_class] = by_license_class.get(entry.license_class, 0) + 1
            if entry.is_club:
                club_stations += 1
            if entry.is_hidden:
                hidden_entries += 1
        return DatabaseStats(
            total=len(db.entries),
            by_district=dict(sorted(by_district.items())),
            by_license_class=dict(sorted(by_license_class.items())),
            club_stations=club_stations,
            hidden_entries=hidden_entries,
        )

    def check_suffix(
        self, suffix: str, districts: Optional[Iterable[int]] = None
    ) -> AvailabilityResult:
        """Partition districts into free and taken for a suffix.

        The suffix is not validated here; see
        ``oeradio.adapters.availability.check_availability``.
        """
        normalized = normalize(suffix)
        available: List[int] = []
        taken: List[int] = []
        taken_by: List[TakenBy] = []

        for district in districts if districts is not None else ALL_DISTRICTS:
            entry = self.find(build_callsign(district, normalized))
            if entry is None:
                available.append(district)
                continue
            taken.append(district)
            taken_by.append(
                TakenBy(
                    district=district,
                    callsign=entry.callsign,
                    name=HIDDEN_DISPLAY_NAME if entry.is_hidden else entry.name,
                )
            )

        return AvailabilityResult(
            suffix=normalized,
            available=bool(available),
            available_districts=available,
            taken_districts=taken,
            taken_by=taken_by,
        )

    def search(
        self,
        pattern: str,
        district: Optional[int] = None,
        license_class: Optional[int] = None,
        club_only: bool = False,
        limit: int = 50,
    ) -> List[CallsignRecord]:
        """Find callsigns matching a ``*`` wildcard pattern (case-insensitive)."""
        db = self.load()
        regex = re.compile(
            "^" + ".*".join(re.escape(p) for p in pattern.split("*")) + "$", re.IGNORECASE
        )
        results = []
        for entry in db.entries:
            if not regex.match(entry.callsign):
                continue
            if district is not None and entry.district != district:
                continue
            if license_class is not None and entry.license_class != license_class:
                continue
            if club_only and not entry.is_club:
                continue
            results.append(entry)
            if len(results) >= limit:
                break
        return results

    def by_suffix(self, suffix: str) -> List[CallsignRecord]:
        """All records sharing a suffix across districts."""
        normalized = normalize(suffix)
        return [e for e in self.load().entries if e.suffix == normalized]
