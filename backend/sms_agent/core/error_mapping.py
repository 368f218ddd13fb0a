"""Shared error code mapping for SMS transport and check-in store failures."""
from ..services.store.base import CheckinStoreError
from ..services.transport.base import SMSTransportError
from .types import ErrorPayload

SMS_ERROR_CODE_TRANSPORT = "SMS_TRANSPORT_FAILED"
SMS_ERROR_CODE_STORE = "CHECKIN_STORE_FAILED"
SMS_ERROR_CODE_SIGNATURE = "SIGNATURE_INVALID"
SMS_ERROR_CODE_CONSENT = "SMS_CONSENT_MISSING"
SMS_ERROR_CODE_INVALID_INPUT = "SMS_INPUT_INVALID"
SMS_ERROR_CODE_GENERIC = "SMS_PROCESSING_FAILED"


def classify_sms_error_code(error: BaseException) -> str:
    """Classify a collaborator failure into a stable error code."""
    if isinstance(error, CheckinStoreError):
        return SMS_ERROR_CODE_STORE
    if isinstance(error, SMSTransportError):
        return SMS_ERROR_CODE_TRANSPORT
    if isinstance(error, ValueError):
        return SMS_ERROR_CODE_INVALID_INPUT
    return SMS_ERROR_CODE_GENERIC


def build_error_payload(
    code: str,
    message: str,
    details: str | None = None,
) -> ErrorPayload:
    """Build a standardized error payload, omitting empty optional fields."""
    payload: ErrorPayload = {"code": code, "message": message}
    if details:
        payload["details"] = details
    return payload


def build_exception_error_payload(error: BaseException, message: str) -> ErrorPayload:
    return build_error_payload(classify_sms_error_code(error), message, details=str(error) or None)
