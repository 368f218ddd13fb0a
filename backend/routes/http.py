from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sms_agent.config import get_services
from sms_agent.core import (
    SendSMSRequest,
    SMSSendResponse,
    StatusResponse,
    TriageTextRequest,
    TriageTextResponse,
    WelcomeSMSRequest,
    ReminderSMSRequest,
)
from sms_agent.core.error_mapping import (
    SMS_ERROR_CODE_CONSENT,
    SMS_ERROR_CODE_TRANSPORT,
    build_error_payload,
    build_exception_error_payload,
)
from sms_agent.core.logging_utils import log_event, mask_phone
from sms_agent.services.transport import SMSTransportError

router = APIRouter()


def get_sms_services():
    return get_services()


@router.get("/", response_model=StatusResponse)
def read_root():
    return {"status": "online", "system": "D2Buff SMS Triage"}


@router.post("/triage", response_model=TriageTextResponse)
def triage_message(request: TriageTextRequest, services: dict = Depends(get_sms_services)):
    reply = services["triage"].triage(request.text, language=request.language)
    if reply.command is not None:
        return {
            "symptoms": [],
            "risk_level": None,
            "response": reply.text,
            "command": reply.command.value,
        }
    return {
        "symptoms": list(reply.result.symptoms),
        "risk_level": reply.result.risk_level.value,
        "response": reply.text,
        "command": None,
    }


def _send_envelope(to: str, send) -> dict:
    try:
        sent = send()
    except SMSTransportError as err:
        log_event(
            component="http",
            event="sms_send_failed",
            level="ERROR",
            details={"to": mask_phone(to), "error": str(err)},
        )
        return {
            "success": False,
            "data": {},
            "error": build_exception_error_payload(err, "SMS transport is not available."),
        }

    if not sent:
        return {
            "success": False,
            "data": {"to": to},
            "error": build_error_payload(
                SMS_ERROR_CODE_TRANSPORT,
                "SMS provider did not accept the message.",
            ),
        }
    return {"success": True, "data": {"to": to}, "error": None}


@router.post("/sms/send", response_model=SMSSendResponse)
async def send_sms(request: SendSMSRequest, services: dict = Depends(get_sms_services)):
    transport = services["transport"]
    return await run_in_threadpool(
        _send_envelope,
        request.to,
        lambda: transport.send_message(request.to, request.body),
    )


@router.post("/sms/welcome", response_model=SMSSendResponse)
async def send_welcome_sms(request: WelcomeSMSRequest, services: dict = Depends(get_sms_services)):
    transport = services["transport"]
    return await run_in_threadpool(
        _send_envelope,
        request.to,
        lambda: transport.send_welcome_sms(request.to, request.name, request.language),
    )


@router.post("/sms/reminder", response_model=SMSSendResponse)
async def send_reminder_sms(request: ReminderSMSRequest, services: dict = Depends(get_sms_services)):
    if not await run_in_threadpool(services["triage"].can_send_reminder, request.to):
        return {
            "success": False,
            "data": {"to": request.to},
            "error": build_error_payload(
                SMS_ERROR_CODE_CONSENT,
                "Recipient is not registered or has opted out of SMS.",
            ),
        }
    transport = services["transport"]
    return await run_in_threadpool(
        _send_envelope,
        request.to,
        lambda: transport.send_health_reminder(request.to, request.reminder),
    )
