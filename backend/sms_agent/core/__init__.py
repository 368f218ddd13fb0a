"""Core abstractions and types for the SMS agent."""
from .types import CommandName, ErrorPayload, RiskLevelName, SymptomTags
from .schemas import (
    TriageTextRequest,
    SendSMSRequest,
    WelcomeSMSRequest,
    ReminderSMSRequest,
    TriageTextResponse,
    SMSSendResponse,
    StatusResponse,
)

__all__ = [
    # Types
    "CommandName",
    "ErrorPayload",
    "RiskLevelName",
    "SymptomTags",
    # Schemas
    "TriageTextRequest",
    "SendSMSRequest",
    "WelcomeSMSRequest",
    "ReminderSMSRequest",
    "TriageTextResponse",
    "SMSSendResponse",
    "StatusResponse",
]
