"""Transport that only logs outbound messages, for local runs and demos."""
from ...core.logging_utils import log_event, mask_phone, text_fingerprint
from .base import BaseSMSTransport


class LoggingSMSTransport(BaseSMSTransport):
    """Records every message instead of sending it."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def send_message(self, to: str, body: str) -> bool:
        self.sent.append((to, body))
        log_event(
            component="logging_transport",
            event="sms_simulated",
            details={
                "to": mask_phone(to),
                "body_chars": len(body),
                "body_sha256_12": text_fingerprint(body),
            },
        )
        return True
