"""API request and response schemas for the D2Buff SMS service."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, Optional, Any
from sms_agent.core.types import CommandName, ErrorPayload, RiskLevelName, SymptomTags


# ============= Request Schemas =============

class TriageTextRequest(BaseModel):
    """Request schema for the /triage endpoint.

    Classifies one message body without persisting anything, which makes it
    the entry point for app-side previews and demos.
    """
    text: str = Field(
        ...,
        description="Free-text message body"
    )
    language: Optional[str] = Field(
        default=None,
        description="Reply language (english or hindi); unknown values fall back to english"
    )


class SendSMSRequest(BaseModel):
    """Request schema for /sms/send."""

    to: str = Field(..., description="Destination phone number", min_length=1)
    body: str = Field(..., description="Message text", min_length=1)
    model_config = ConfigDict(extra="forbid")


class WelcomeSMSRequest(BaseModel):
    """Request schema for /sms/welcome."""

    to: str = Field(..., description="Destination phone number", min_length=1)
    name: str = Field(..., description="Name used in the greeting", min_length=1)
    language: Optional[str] = Field(default=None, description="Greeting language")
    model_config = ConfigDict(extra="forbid")


class ReminderSMSRequest(BaseModel):
    """Request schema for /sms/reminder. Sent only to opted-in users."""

    to: str = Field(..., description="Registered phone number", min_length=1)
    reminder: str = Field(..., description="Reminder text", min_length=1)
    model_config = ConfigDict(extra="forbid")


# ============= Response Schemas =============

class TriageTextResponse(BaseModel):
    """Response from /triage.

    ``command`` is set when the message was a HELP/STOP/START command, in which
    case no symptoms are extracted and ``risk_level`` is null.
    """
    symptoms: SymptomTags = Field(
        default_factory=list,
        description="Matched symptom tags in keyword-table order"
    )
    risk_level: Optional[RiskLevelName] = Field(
        default=None,
        description="Risk tier for the message"
    )
    response: str = Field(..., description="Reply text")
    command: Optional[CommandName] = Field(
        default=None,
        description="Command detected before triage, if any"
    )


class SMSSendResponse(BaseModel):
    """Envelope response from /sms/send and /sms/welcome."""

    success: bool = Field(..., description="Whether the transport accepted the message")
    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Send metadata",
    )
    error: Optional[ErrorPayload] = Field(
        default=None,
        description="Error metadata when success is false",
    )
    model_config = ConfigDict(extra="forbid")


class StatusResponse(BaseModel):
    """Generic status response for health check endpoints."""
    status: str = Field(..., description="Service status")
    system: Optional[str] = Field(None, description="System identifier")
