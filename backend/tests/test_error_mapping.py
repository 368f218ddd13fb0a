import pytest

from sms_agent.core import SMSSendResponse
from sms_agent.core.error_mapping import (
    SMS_ERROR_CODE_CONSENT,
    SMS_ERROR_CODE_GENERIC,
    SMS_ERROR_CODE_INVALID_INPUT,
    SMS_ERROR_CODE_STORE,
    SMS_ERROR_CODE_TRANSPORT,
    build_error_payload,
    build_exception_error_payload,
    classify_sms_error_code,
)
from sms_agent.services.store import CheckinStoreError
from sms_agent.services.transport import SMSTransportError


@pytest.mark.parametrize(
    ("error", "expected_code"),
    [
        (CheckinStoreError("Failed to store check-in: disk I/O error"), SMS_ERROR_CODE_STORE),
        (SMSTransportError("TWILIO_PHONE_NUMBER is required"), SMS_ERROR_CODE_TRANSPORT),
        (ValueError("A red reply needs at least one symptom"), SMS_ERROR_CODE_INVALID_INPUT),
        (RuntimeError("Unknown runtime failure"), SMS_ERROR_CODE_GENERIC),
    ],
)
def test_classify_sms_error_code_matrix(error: BaseException, expected_code: str):
    assert classify_sms_error_code(error) == expected_code


def test_build_error_payload_omits_empty_optional_fields():
    payload = build_error_payload(SMS_ERROR_CODE_GENERIC, "Unknown runtime failure", details="")

    assert payload == {
        "code": SMS_ERROR_CODE_GENERIC,
        "message": "Unknown runtime failure",
    }


def test_build_exception_error_payload_includes_details():
    payload = build_exception_error_payload(
        SMSTransportError("TWILIO_AUTH_TOKEN missing"),
        "SMS transport is not available.",
    )

    assert payload == {
        "code": SMS_ERROR_CODE_TRANSPORT,
        "message": "SMS transport is not available.",
        "details": "TWILIO_AUTH_TOKEN missing",
    }


def test_error_payload_fits_send_envelope_schema():
    envelope = SMSSendResponse(
        success=False,
        error=build_error_payload(SMS_ERROR_CODE_CONSENT, "Recipient has opted out of SMS."),
    )

    assert envelope.error == {
        "code": "SMS_CONSENT_MISSING",
        "message": "Recipient has opted out of SMS.",
    }
