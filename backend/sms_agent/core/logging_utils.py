"""Structured JSON logging utilities for SMS check-in tracing."""
from __future__ import annotations

import contextvars
import hashlib
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Literal, Mapping

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

_message_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "sms_message_id",
    default=None,
)

_level_map: dict[LogLevelName, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _get_logger() -> logging.Logger:
    logger = logging.getLogger("sms_agent.structured")
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def set_message_id(message_id: str | None) -> None:
    """Store the id of the inbound message being handled in this context."""
    _message_id_ctx.set(message_id)


def get_message_id() -> str | None:
    """Return the active inbound message id."""
    return _message_id_ctx.get()


def clear_log_context() -> None:
    """Reset message tracing metadata for the current context."""
    set_message_id(None)


def mask_phone(phone: str | None) -> str | None:
    """Keep only the last four digits of a phone number."""
    if not phone:
        return None
    digits = "".join(char for char in phone if char.isdigit())
    if len(digits) <= 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]


def text_fingerprint(text: str) -> str:
    """Short stable hash so message bodies can be correlated without being logged."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]


def _iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def log_event(
    *,
    component: str,
    event: str,
    level: LogLevelName = "INFO",
    message_id: str | None = None,
    details: Mapping[str, Any] | None = None,
) -> None:
    """Emit a structured JSON log line to stdout."""
    resolved_message_id = message_id if message_id is not None else get_message_id()
    payload: dict[str, Any] = {
        "ts": _iso_timestamp(),
        "level": level,
        "component": component,
        "event": event,
        "message_id": resolved_message_id,
        "details": dict(details or {}),
    }
    _get_logger().log(_level_map[level], json.dumps(payload, ensure_ascii=True, separators=(",", ":")))


def _duration_to_ms(duration_s: float) -> float:
    if duration_s < 0:
        return 0.0
    return round(duration_s * 1000.0, 3)


def log_latency_event(
    *,
    component: str,
    event: str,
    stage: str,
    duration_s: float,
    status: str,
    level: LogLevelName = "INFO",
    details: Mapping[str, Any] | None = None,
) -> None:
    """Emit a latency log event for one processing stage."""
    payload_details = dict(details or {})
    payload_details.update(
        {
            "stage": stage,
            "status": status,
            "duration_ms": _duration_to_ms(duration_s),
        }
    )
    log_event(
        component=component,
        event=event,
        level=level,
        details=payload_details,
    )
