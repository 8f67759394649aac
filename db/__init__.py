"""Flat-file record store for the event lead portal."""
from db.errors import InvalidTransitionError, RecordNotFoundError
from db.store import RecordKind, RecordStore
from db.storage import Stores, open_stores

__all__ = [
    "RecordKind", "RecordStore", "Stores", "open_stores",
    "RecordNotFoundError", "InvalidTransitionError",
]
