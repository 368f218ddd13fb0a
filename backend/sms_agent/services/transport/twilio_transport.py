"""Twilio Programmable Messaging transport."""
from __future__ import annotations

import time

from requests.exceptions import RequestException
from twilio.base.exceptions import TwilioException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from ...core.logging_utils import log_event, log_latency_event, mask_phone
from .base import BaseSMSTransport, SMSTransportError


class TwilioSMSTransport(BaseSMSTransport):
    """Sends messages through ``Client.messages.create``."""

    def __init__(
        self,
        account_sid: str | None,
        auth_token: str | None,
        from_number: str | None,
        client: Client | None = None,
        timeout_s: float = 10.0,
    ):
        if not from_number:
            raise SMSTransportError("TWILIO_PHONE_NUMBER is required for the twilio transport")
        if client is None:
            if not account_sid or not auth_token:
                raise SMSTransportError(
                    "TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN are required for the twilio transport"
                )
            http_client = TwilioHttpClient(timeout=timeout_s)
            client = Client(account_sid, auth_token, http_client=http_client)
        self.client = client
        self.from_number = from_number

    def send_message(self, to: str, body: str) -> bool:
        started_at = time.perf_counter()
        try:
            message = self.client.messages.create(body=body, from_=self.from_number, to=to)
        except (TwilioException, RequestException) as err:
            log_event(
                component="twilio_transport",
                event="sms_send_failed",
                level="ERROR",
                details={"to": mask_phone(to), "error": str(err)},
            )
            log_latency_event(
                component="twilio_transport",
                event="sms_send_latency",
                stage="sms_send",
                duration_s=time.perf_counter() - started_at,
                status="failed",
                level="ERROR",
            )
            return False

        log_event(
            component="twilio_transport",
            event="sms_sent",
            details={"to": mask_phone(to), "sid": message.sid, "body_chars": len(body)},
        )
        log_latency_event(
            component="twilio_transport",
            event="sms_send_latency",
            stage="sms_send",
            duration_s=time.perf_counter() - started_at,
            status="completed",
        )
        return True
