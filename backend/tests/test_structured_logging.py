from contextlib import contextmanager
from io import StringIO
import json
import logging

from sms_agent.core.logging_utils import (
    clear_log_context,
    log_event,
    log_latency_event,
    mask_phone,
    set_message_id,
)
from sms_agent.pipelines import SMSTriageService
from sms_agent.services.store import UserProfile


def _parse_log_lines(raw_output: str) -> list[dict]:
    lines = [line for line in raw_output.splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


@contextmanager
def _capture_structured_logs():
    logger = logging.getLogger("sms_agent.structured")
    original_handlers = list(logger.handlers)
    original_level = logger.level
    original_propagate = logger.propagate

    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [handler]
    logger.setLevel(logging.INFO)
    logger.propagate = False
    try:
        yield buffer
    finally:
        handler.flush()
        logger.handlers = original_handlers
        logger.setLevel(original_level)
        logger.propagate = original_propagate


def test_log_event_schema_includes_required_fields():
    set_message_id("SM-schema")

    with _capture_structured_logs() as buffer:
        log_event(component="test_component", event="test_event")
    parsed = _parse_log_lines(buffer.getvalue())
    assert parsed
    record = parsed[-1]

    assert "ts" in record
    assert record["level"] == "INFO"
    assert record["component"] == "test_component"
    assert record["event"] == "test_event"
    assert record["message_id"] == "SM-schema"
    assert "details" in record
    assert isinstance(record["details"], dict)

    clear_log_context()


def test_latency_event_reports_duration_in_ms():
    clear_log_context()

    with _capture_structured_logs() as buffer:
        log_latency_event(
            component="test_component",
            event="stage_latency",
            stage="store",
            duration_s=0.25,
            status="completed",
        )
    record = _parse_log_lines(buffer.getvalue())[-1]

    assert record["message_id"] is None
    assert record["details"] == {"stage": "store", "status": "completed", "duration_ms": 250.0}


def test_mask_phone_keeps_last_four_digits():
    assert mask_phone("+91 98000 00001") == "********0001"
    assert mask_phone("123") == "***"
    assert mask_phone(None) is None


class _SingleUserStore:
    def __init__(self):
        self.profile = UserProfile(id="user-1", phone="+919800000001")

    def find_user_by_phone(self, phone):
        return self.profile

    def store_checkin(self, record):
        pass

    def get_primary_emergency_contact(self, user_id):
        return None


def test_pipeline_logs_never_contain_raw_body_or_phone():
    service = SMSTriageService(store=_SingleUserStore())
    set_message_id("SM-privacy")

    with _capture_structured_logs() as buffer:
        service.process_incoming_sms("+919800000001", "heavy bleeding since noon")
    raw_output = buffer.getvalue()
    parsed = _parse_log_lines(raw_output)

    assert "heavy bleeding since noon" not in raw_output
    assert "+919800000001" not in raw_output

    received = [log for log in parsed if log.get("event") == "sms_received"]
    assert len(received) == 1
    assert received[0]["message_id"] == "SM-privacy"
    assert received[0]["details"]["from"] == "********0001"
    assert len(received[0]["details"]["body_sha256_12"]) == 12

    processed = [log for log in parsed if log.get("event") == "sms_processed"]
    assert len(processed) == 1
    assert processed[0]["details"]["risk_level"] == "red"
    assert processed[0]["details"]["symptoms"] == ["bleeding"]
    assert processed[0]["details"]["persisted"] is True

    clear_log_context()
