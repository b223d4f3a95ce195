"""Adapter exports."""

from .callsign import CallsignAdapter, get_callsign_adapter, reset_callsign_adapter
from .database import CallsignDatabaseError, CallsignDatabaseMissingError, CallsignDatabaseStore
from .lookup import CallsignLookupEngine

__all__ = [
    "CallsignAdapter",
    "get_callsign_adapter",
    "reset_callsign_adapter",
    "CallsignDatabaseStore",
    "CallsignDatabaseError",
    "CallsignDatabaseMissingError",
    "CallsignLookupEngine",
]
