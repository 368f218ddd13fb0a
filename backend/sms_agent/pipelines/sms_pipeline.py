"""Inbound SMS check-in orchestration."""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from ..core.logging_utils import log_event, log_latency_event, mask_phone, text_fingerprint
from ..services.store.base import (
    BaseCheckinStore,
    CheckinRecord,
    CheckinStoreError,
    UserProfile,
)
from ..services.transport.base import BaseSMSTransport, SMSTransportError
from ..triage import (
    DEFAULT_RULES,
    RandomSource,
    SMSCommand,
    TriageResult,
    TriageRules,
    command_reply,
    detect_command,
    generate_response,
    get_templates,
    normalize_language,
    triage_text,
)
from ..triage.rules import RiskLevel

_COMPONENT = "sms_pipeline"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SMSReply:
    """Reply text plus what happened while producing it."""

    text: str
    command: SMSCommand | None = None
    result: TriageResult | None = None
    user_id: str | None = None
    persisted: bool = False
    alert_sent: bool = False


class SMSTriageService:
    """
    Turns one inbound text into one reply.

    HELP/STOP/START commands are answered before any symptom parsing. Everything
    else is triaged; the check-in is persisted and red-tier check-ins alert the
    primary emergency contact. Store and transport failures are logged and never
    change the reply sent back to the mother.
    """

    def __init__(
        self,
        store: BaseCheckinStore | None = None,
        transport: BaseSMSTransport | None = None,
        rules: TriageRules = DEFAULT_RULES,
        rng: RandomSource | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.transport = transport
        self.rules = rules
        self.rng = rng
        self.clock = clock

    def triage(self, text: str, language: str | None = None) -> SMSReply:
        """Answer a message without touching the store or the transport."""
        command = detect_command(text)
        if command is not None:
            return SMSReply(text=command_reply(command, language), command=command)

        result = triage_text(text, self.rules)
        reply_text = generate_response(
            result.risk_level,
            result.symptoms,
            language=language,
            rng=self.rng,
        )
        return SMSReply(text=reply_text, result=result)

    def process_incoming_sms(self, sender: str, body: str) -> SMSReply:
        started_at = time.perf_counter()
        log_event(
            component=_COMPONENT,
            event="sms_received",
            details={
                "from": mask_phone(sender),
                "body_chars": len(body),
                "body_sha256_12": text_fingerprint(body),
            },
        )

        command = detect_command(body)
        if command is not None:
            reply = self._handle_command(sender, command)
            self._log_completed(reply, started_at)
            return reply

        profile, lookup_failed = self._find_profile(sender)
        if profile is None and not lookup_failed and self.store is not None:
            reply = SMSReply(text=get_templates().not_registered)
            self._log_completed(reply, started_at)
            return reply

        language = normalize_language(profile.preferred_language if profile else None)
        result = triage_text(body, self.rules)
        reply_text = generate_response(
            result.risk_level,
            result.symptoms,
            language=language,
            rng=self.rng,
        )

        persisted = False
        alert_sent = False
        if profile is not None:
            persisted = self._store_checkin(profile, result, body)
            if result.risk_level is RiskLevel.RED:
                alert_sent = self._send_emergency_alert(profile, result)

        reply = SMSReply(
            text=reply_text,
            result=result,
            user_id=profile.id if profile else None,
            persisted=persisted,
            alert_sent=alert_sent,
        )
        self._log_completed(reply, started_at)
        return reply

    def can_send_reminder(self, phone: str) -> bool:
        """True when ``phone`` belongs to a registered user who has not opted out.

        Only unsolicited messages (reminders) are gated; replies to inbound texts
        and emergency alerts to family contacts are always sent.
        """
        profile, lookup_failed = self._find_profile(phone)
        if profile is None:
            log_event(
                component=_COMPONENT,
                event="reminder_skipped",
                level="WARNING",
                details={
                    "to": mask_phone(phone),
                    "reason": "lookup_failed" if lookup_failed else "not_registered",
                },
            )
            return False
        try:
            consent = self.store.has_sms_consent(profile.id)
        except CheckinStoreError as err:
            log_event(
                component=_COMPONENT,
                event="consent_lookup_failed",
                level="ERROR",
                details={"user_id": profile.id, "error": str(err)},
            )
            return False
        if not consent:
            log_event(
                component=_COMPONENT,
                event="reminder_skipped",
                details={"user_id": profile.id, "reason": "opted_out"},
            )
        return consent

    def _handle_command(self, sender: str, command: SMSCommand) -> SMSReply:
        if command in (SMSCommand.STOP, SMSCommand.START) and self.store is not None:
            consent = command is SMSCommand.START
            try:
                updated = self.store.update_sms_consent(sender, consent)
            except CheckinStoreError as err:
                log_event(
                    component=_COMPONENT,
                    event="consent_update_failed",
                    level="ERROR",
                    details={"command": command.value, "error": str(err)},
                )
            else:
                log_event(
                    component=_COMPONENT,
                    event="consent_updated",
                    details={"command": command.value, "consent": consent, "updated": updated},
                )
        profile, _ = self._find_profile(sender)
        language = normalize_language(profile.preferred_language if profile else None)
        return SMSReply(
            text=command_reply(command, language),
            command=command,
            user_id=profile.id if profile else None,
        )

    def _find_profile(self, sender: str) -> tuple[UserProfile | None, bool]:
        if self.store is None:
            return None, False
        try:
            return self.store.find_user_by_phone(sender), False
        except CheckinStoreError as err:
            log_event(
                component=_COMPONENT,
                event="profile_lookup_failed",
                level="ERROR",
                details={"from": mask_phone(sender), "error": str(err)},
            )
            return None, True

    def _store_checkin(self, profile: UserProfile, result: TriageResult, body: str) -> bool:
        now = self.clock()
        record = CheckinRecord(
            user_id=profile.id,
            checkin_date=now.date(),
            original_text=body,
            symptoms=result.symptoms,
            risk_level=result.risk_level.value,
            created_at=now,
            insights={
                "source": "sms",
                "processed_at": now.isoformat(),
                "risk_assessment": result.risk_level.value,
            },
        )
        store_started_at = time.perf_counter()
        try:
            self.store.store_checkin(record)
        except CheckinStoreError as err:
            log_event(
                component=_COMPONENT,
                event="checkin_store_failed",
                level="ERROR",
                details={"user_id": profile.id, "error": str(err)},
            )
            log_latency_event(
                component=_COMPONENT,
                event="checkin_store_latency",
                stage="store",
                duration_s=time.perf_counter() - store_started_at,
                status="failed",
                level="ERROR",
            )
            return False

        log_latency_event(
            component=_COMPONENT,
            event="checkin_store_latency",
            stage="store",
            duration_s=time.perf_counter() - store_started_at,
            status="completed",
        )
        return True

    def _send_emergency_alert(self, profile: UserProfile, result: TriageResult) -> bool:
        if self.transport is None:
            return False
        try:
            contact = self.store.get_primary_emergency_contact(profile.id)
        except CheckinStoreError as err:
            log_event(
                component=_COMPONENT,
                event="emergency_contact_lookup_failed",
                level="ERROR",
                details={"user_id": profile.id, "error": str(err)},
            )
            return False
        if contact is None:
            log_event(
                component=_COMPONENT,
                event="emergency_contact_missing",
                level="WARNING",
                details={"user_id": profile.id},
            )
            return False

        try:
            sent = self.transport.send_emergency_sms(
                contact.phone, f"{result.primary_symptom} detected"
            )
        except SMSTransportError as err:
            log_event(
                component=_COMPONENT,
                event="emergency_alert_failed",
                level="ERROR",
                details={"user_id": profile.id, "error": str(err)},
            )
            return False

        log_event(
            component=_COMPONENT,
            event="emergency_alert_sent" if sent else "emergency_alert_failed",
            level="WARNING" if sent else "ERROR",
            details={"user_id": profile.id, "to": mask_phone(contact.phone)},
        )
        return sent

    def _log_completed(self, reply: SMSReply, started_at: float) -> None:
        details: dict[str, object] = {
            "command": reply.command.value if reply.command else None,
            "persisted": reply.persisted,
            "alert_sent": reply.alert_sent,
        }
        if reply.result is not None:
            details["risk_level"] = reply.result.risk_level.value
            details["symptoms"] = list(reply.result.symptoms)
        log_latency_event(
            component=_COMPONENT,
            event="sms_processed",
            stage="process_sms",
            duration_s=time.perf_counter() - started_at,
            status="completed",
            details=details,
        )
