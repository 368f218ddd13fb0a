import os
import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, Response
from twilio.request_validator import RequestValidator
from twilio.twiml.messaging_response import MessagingResponse

from routes.http import get_sms_services
from sms_agent.config import get_bool_setting
from sms_agent.core.error_mapping import SMS_ERROR_CODE_SIGNATURE, classify_sms_error_code
from sms_agent.core.logging_utils import clear_log_context, log_event, set_message_id
from sms_agent.triage import get_templates

router = APIRouter()

_WEBHOOK_PATH = "/sms/webhook"


def build_twiml(message: str) -> str:
    """Wrap one reply in a TwiML ``<Response><Message>`` document."""
    response = MessagingResponse()
    response.message(message)
    return str(response)


def _twiml_response(message: str) -> Response:
    return Response(content=build_twiml(message), media_type="application/xml")


def _webhook_url(request: Request) -> str:
    public_url = os.environ.get("D2BUFF_PUBLIC_URL", "").strip().rstrip("/")
    if public_url:
        return f"{public_url}{_WEBHOOK_PATH}"
    return str(request.url)


def _is_valid_signature(request: Request, form: dict[str, str]) -> bool:
    auth_token = os.environ.get("TWILIO_AUTH_TOKEN", "")
    if not auth_token:
        return False
    validator = RequestValidator(auth_token)
    signature = request.headers.get("X-Twilio-Signature", "")
    return validator.validate(_webhook_url(request), form, signature)


def get_webhook_services():
    """Resolve the shared services, reporting a wiring failure as ``None``.

    The webhook must always answer with TwiML, so a broken store URL or
    transport setting is handled inside the route instead of surfacing as a
    plain 500 from dependency resolution.
    """
    try:
        return get_sms_services()
    except Exception as err:
        log_event(
            component="sms_webhook",
            event="services_unavailable",
            level="ERROR",
            details={"code": classify_sms_error_code(err), "error": str(err)},
        )
        return None


@router.get(_WEBHOOK_PATH, response_class=PlainTextResponse)
def webhook_status():
    return "SMS Webhook is active"


@router.post(_WEBHOOK_PATH)
async def receive_sms(request: Request, services: dict | None = Depends(get_webhook_services)):
    set_message_id(f"sms-{uuid.uuid4().hex[:12]}")
    try:
        form = {key: str(value) for key, value in (await request.form()).items()}
        if form.get("MessageSid"):
            set_message_id(form["MessageSid"])

        if get_bool_setting("D2BUFF_VALIDATE_TWILIO_SIGNATURE") and not _is_valid_signature(request, form):
            log_event(
                component="sms_webhook",
                event="signature_rejected",
                level="WARNING",
                details={"code": SMS_ERROR_CODE_SIGNATURE},
            )
            return PlainTextResponse("Invalid Twilio signature", status_code=403)

        if services is None:
            raise RuntimeError("SMS services are unavailable")

        reply = await run_in_threadpool(
            services["triage"].process_incoming_sms,
            form.get("From", ""),
            form.get("Body", ""),
        )
    except Exception as err:
        log_event(
            component="sms_webhook",
            event="sms_processing_failed",
            level="ERROR",
            details={"code": classify_sms_error_code(err), "error": str(err)},
        )
        return _twiml_response(get_templates().processing_error)
    finally:
        clear_log_context()

    return _twiml_response(reply.text)
