"""Check-in store module."""
from .base import (
    BaseCheckinStore,
    CheckinRecord,
    CheckinStoreError,
    EmergencyContact,
    UserProfile,
)
from .sql import SQLCheckinStore, create_store_engine

__all__ = [
    "BaseCheckinStore",
    "CheckinRecord",
    "CheckinStoreError",
    "EmergencyContact",
    "UserProfile",
    "SQLCheckinStore",
    "create_store_engine",
]
