import asyncio
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.concurrency import run_in_threadpool

from sms_agent.pipelines import SMSTriageService
from sms_agent.services.store import (
    BaseCheckinStore,
    CheckinStoreError,
    EmergencyContact,
    UserProfile,
)
from sms_agent.services.transport import LoggingSMSTransport, SMSTransportError
from sms_agent.triage import RiskLevel, SMSCommand, build_triage_rules
from sms_agent.triage.templates import ENGLISH_TEMPLATES, HINDI_TEMPLATES

MOTHER_PHONE = "+919800000001"
FAMILY_PHONE = "+919800000002"
FIXED_NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


class InMemoryStore(BaseCheckinStore):
    def __init__(self, profiles=(), contacts=()):
        self.profiles = {profile.phone: profile for profile in profiles}
        self.contacts = list(contacts)
        self.checkins = []
        self.consent_updates = []
        self.opted_out = set()

    def find_user_by_phone(self, phone):
        return self.profiles.get(phone)

    def store_checkin(self, record):
        self.checkins.append(record)

    def update_sms_consent(self, phone, consent):
        self.consent_updates.append((phone, consent))
        return phone in self.profiles

    def has_sms_consent(self, user_id):
        return user_id not in self.opted_out

    def get_primary_emergency_contact(self, user_id):
        for contact in self.contacts:
            if contact.user_id == user_id and contact.is_primary:
                return contact
        return None


class FirstChoice:
    def choice(self, seq):
        return seq[0]


@pytest.fixture
def profile():
    return UserProfile(id="user-1", phone=MOTHER_PHONE, full_name="Asha")


@pytest.fixture
def store(profile):
    return InMemoryStore(
        profiles=[profile],
        contacts=[EmergencyContact(user_id="user-1", name="Ravi", phone=FAMILY_PHONE, is_primary=True)],
    )


@pytest.fixture
def transport():
    return LoggingSMSTransport()


@pytest.fixture
def service(store, transport):
    return SMSTriageService(store=store, transport=transport, rng=FirstChoice(), clock=lambda: FIXED_NOW)


def test_red_checkin_is_persisted_and_alerts_primary_contact(service, store, transport):
    reply = service.process_incoming_sms(MOTHER_PHONE, "bleeding heavy")

    assert reply.result.symptoms == ("bleeding",)
    assert reply.result.risk_level is RiskLevel.RED
    assert "bleeding" in reply.text
    assert "contact a doctor" in reply.text
    assert reply.persisted is True
    assert reply.alert_sent is True

    assert len(store.checkins) == 1
    record = store.checkins[0]
    assert record.user_id == "user-1"
    assert record.symptoms == ("bleeding",)
    assert record.risk_level == "red"
    assert record.original_text == "bleeding heavy"
    assert record.checkin_date == FIXED_NOW.date()
    assert record.insights == {
        "source": "sms",
        "processed_at": FIXED_NOW.isoformat(),
        "risk_assessment": "red",
    }

    assert transport.sent == [
        (
            FAMILY_PHONE,
            "Aarogya Emergency Alert: bleeding detected - Please check on your family member immediately.",
        )
    ]


def test_yellow_checkin_uses_low_mood_remedy_and_sends_no_alert(service, store, transport):
    reply = service.process_incoming_sms(MOTHER_PHONE, "tired and sad")

    assert reply.result.symptoms == ("low_mood", "tired")
    assert reply.result.risk_level is RiskLevel.YELLOW
    assert "Deep breathing exercises and talk to family" in reply.text
    assert reply.alert_sent is False
    assert len(store.checkins) == 1
    assert transport.sent == []


def test_message_without_keywords_gets_green_tip(service, store):
    reply = service.process_incoming_sms(MOTHER_PHONE, "all fine today")

    assert reply.result.risk_level is RiskLevel.GREEN
    assert reply.text == ENGLISH_TEMPLATES.green.format(tip="Drink warm fluids and rest")
    assert store.checkins[0].symptoms == ()


def test_help_short_circuits_before_triage(service, store, transport):
    reply = service.process_incoming_sms(MOTHER_PHONE, "please HELP me, I have a fever")

    assert reply.command is SMSCommand.HELP
    assert reply.text == ENGLISH_TEMPLATES.help
    assert reply.result is None
    assert store.checkins == []
    assert transport.sent == []


def test_stop_opts_out_and_start_opts_back_in(service, store):
    stop_reply = service.process_incoming_sms(MOTHER_PHONE, "Stop")
    start_reply = service.process_incoming_sms(MOTHER_PHONE, "start")

    assert stop_reply.text == ENGLISH_TEMPLATES.stop
    assert start_reply.text == ENGLISH_TEMPLATES.start
    assert store.consent_updates == [(MOTHER_PHONE, False), (MOTHER_PHONE, True)]
    assert store.checkins == []


def test_stop_reply_survives_consent_update_failure(service, store):
    store.update_sms_consent = MagicMock(side_effect=CheckinStoreError("db down"))

    reply = service.process_incoming_sms(MOTHER_PHONE, "stop")

    assert reply.text == ENGLISH_TEMPLATES.stop


def test_unregistered_number_is_asked_to_sign_up(service, store):
    reply = service.process_incoming_sms("+15550000000", "bleeding")

    assert reply.text == ENGLISH_TEMPLATES.not_registered
    assert reply.result is None
    assert store.checkins == []


def test_storage_failure_still_returns_triage_reply(service, store, transport):
    store.store_checkin = MagicMock(side_effect=CheckinStoreError("disk full"))

    reply = service.process_incoming_sms(MOTHER_PHONE, "fever since morning")

    assert reply.result.risk_level is RiskLevel.RED
    assert "fever" in reply.text
    assert reply.persisted is False
    assert reply.alert_sent is True


def test_lookup_failure_triages_without_persisting(service, store):
    store.find_user_by_phone = MagicMock(side_effect=CheckinStoreError("timeout"))

    reply = service.process_incoming_sms(MOTHER_PHONE, "cramping")

    assert reply.result.risk_level is RiskLevel.YELLOW
    assert reply.user_id is None
    assert reply.persisted is False
    assert store.checkins == []


def test_alert_transport_failure_does_not_change_reply(store):
    failing_transport = MagicMock()
    failing_transport.send_emergency_sms.side_effect = SMSTransportError("provider down")
    service = SMSTriageService(store=store, transport=failing_transport)

    reply = service.process_incoming_sms(MOTHER_PHONE, "breast pain")

    assert reply.result.risk_level is RiskLevel.RED
    # "pain" precedes "breast_pain" in the table, so it is the named symptom.
    assert reply.result.symptoms == ("pain", "breast_pain")
    assert "signs of pain." in reply.text
    assert reply.persisted is True
    assert reply.alert_sent is False


def test_red_without_emergency_contact_sends_nothing(profile, transport):
    store = InMemoryStore(profiles=[profile])
    service = SMSTriageService(store=store, transport=transport)

    reply = service.process_incoming_sms(MOTHER_PHONE, "bleeding")

    assert reply.alert_sent is False
    assert transport.sent == []


def test_reply_uses_preferred_language(transport):
    hindi_profile = UserProfile(id="user-2", phone=MOTHER_PHONE, preferred_language="hindi")
    store = InMemoryStore(profiles=[hindi_profile])
    service = SMSTriageService(
        store=store,
        transport=transport,
        rules=build_triage_rules(["hindi"]),
    )

    reply = service.process_incoming_sms(MOTHER_PHONE, "bukhar hai")

    assert reply.result.symptoms == ("fever",)
    assert reply.text == HINDI_TEMPLATES.red.format(symptom="fever")


def test_command_reply_uses_preferred_language(transport):
    hindi_profile = UserProfile(id="user-2", phone=MOTHER_PHONE, preferred_language="hindi")
    store = InMemoryStore(profiles=[hindi_profile])
    service = SMSTriageService(store=store, transport=transport)

    stop_reply = service.process_incoming_sms(MOTHER_PHONE, "STOP")
    help_reply = service.process_incoming_sms(MOTHER_PHONE, "help")

    assert stop_reply.text == HINDI_TEMPLATES.stop
    assert stop_reply.user_id == "user-2"
    assert help_reply.text == HINDI_TEMPLATES.help
    assert store.consent_updates == [(MOTHER_PHONE, False)]


def test_without_store_messages_are_triaged_anonymously():
    service = SMSTriageService()

    reply = service.process_incoming_sms(MOTHER_PHONE, "bleeding and pain")

    assert reply.result.risk_level is RiskLevel.RED
    assert reply.user_id is None
    assert reply.persisted is False


def test_triage_preview_never_touches_collaborators():
    store = MagicMock()
    transport = MagicMock()
    service = SMSTriageService(store=store, transport=transport)

    reply = service.triage("bleeding heavy")

    assert reply.result.risk_level is RiskLevel.RED
    store.assert_not_called()
    assert store.method_calls == []
    assert transport.method_calls == []


@pytest.mark.asyncio
async def test_concurrent_messages_are_processed_independently(service, store):
    bodies = ["bleeding heavy", "feeling sad", "all good", "fever since morning"]
    replies = await asyncio.gather(
        *(run_in_threadpool(service.process_incoming_sms, MOTHER_PHONE, body) for body in bodies)
    )

    assert [reply.result.risk_level for reply in replies] == [
        RiskLevel.RED,
        RiskLevel.YELLOW,
        RiskLevel.GREEN,
        RiskLevel.RED,
    ]
    assert len(store.checkins) == len(bodies)


def test_reminders_respect_consent(service, store, profile):
    assert service.can_send_reminder(MOTHER_PHONE) is True

    store.opted_out.add(profile.id)
    assert service.can_send_reminder(MOTHER_PHONE) is False


def test_reminders_skip_unregistered_and_unavailable_store(service, store):
    assert service.can_send_reminder("+15550000000") is False

    store.find_user_by_phone = MagicMock(side_effect=CheckinStoreError("db down"))
    assert service.can_send_reminder(MOTHER_PHONE) is False


def test_reminder_consent_read_failure_is_treated_as_no_consent(service, store):
    store.has_sms_consent = MagicMock(side_effect=CheckinStoreError("db down"))

    assert service.can_send_reminder(MOTHER_PHONE) is False
