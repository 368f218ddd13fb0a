"""SMS agent services (check-in store, outbound transport)."""
from .store import (
    BaseCheckinStore,
    CheckinRecord,
    CheckinStoreError,
    EmergencyContact,
    SQLCheckinStore,
    UserProfile,
)
from .transport import (
    BaseSMSTransport,
    LoggingSMSTransport,
    SMSTransportError,
    TwilioSMSTransport,
)

__all__ = [
    # Store
    "BaseCheckinStore",
    "CheckinRecord",
    "CheckinStoreError",
    "EmergencyContact",
    "SQLCheckinStore",
    "UserProfile",
    # Transport
    "BaseSMSTransport",
    "LoggingSMSTransport",
    "SMSTransportError",
    "TwilioSMSTransport",
]
