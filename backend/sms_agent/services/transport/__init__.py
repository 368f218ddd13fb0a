"""Outbound SMS transport module."""
from .base import BaseSMSTransport, SMSTransportError
from .logging_transport import LoggingSMSTransport
from .twilio_transport import TwilioSMSTransport

__all__ = [
    "BaseSMSTransport",
    "SMSTransportError",
    "LoggingSMSTransport",
    "TwilioSMSTransport",
]
