"""Configuration and service factory for the SMS agent."""
import os
import threading
from typing import Any, Dict

from ..core.logging_utils import log_event
from ..pipelines import SMSTriageService
from ..services.store import BaseCheckinStore, SQLCheckinStore
from ..services.transport import BaseSMSTransport, LoggingSMSTransport, TwilioSMSTransport
from ..triage import TriageRules, build_triage_rules

# Singleton service instances
_services: Dict[str, Any] = None
_services_lock = threading.Lock()
_SUPPORTED_TRANSPORTS = ("log", "twilio")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")

DEFAULT_DATABASE_URL = "sqlite:///d2buff.db"


def _normalize_choice(env_name: str, supported: tuple[str, ...], default: str) -> str:
    raw = os.environ.get(env_name, default).strip().lower()
    if raw in supported:
        return raw
    supported_values = ", ".join(supported)
    raise ValueError(
        f"Unsupported {env_name} value '{raw}'. Supported values: {supported_values}."
    )


def get_bool_setting(env_name: str, default: bool = False) -> bool:
    raw = os.environ.get(env_name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{env_name} must be a boolean (true/false), got '{raw}'")


def _resolve_languages() -> tuple[str, ...]:
    raw = os.environ.get("D2BUFF_TRIAGE_LANGUAGES", "english")
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


def _build_rules() -> TriageRules:
    return build_triage_rules(_resolve_languages())


def _build_store() -> BaseCheckinStore:
    database_url = os.environ.get("D2BUFF_DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL
    store = SQLCheckinStore(database_url)
    store.init_db()
    return store


def _build_transport(transport_name: str) -> BaseSMSTransport:
    if transport_name == "twilio":
        log_event(component="settings", event="transport_selected", details={"transport": "twilio"})
        return TwilioSMSTransport(
            account_sid=os.environ.get("TWILIO_ACCOUNT_SID"),
            auth_token=os.environ.get("TWILIO_AUTH_TOKEN"),
            from_number=os.environ.get("TWILIO_PHONE_NUMBER"),
        )
    if transport_name == "log":
        log_event(component="settings", event="transport_selected", details={"transport": "log"})
        return LoggingSMSTransport()
    raise ValueError(f"Unsupported SMS transport: {transport_name}")


def get_services() -> Dict[str, Any]:
    """
    Factory function to get or initialize service instances.

    Returns a dictionary with:
        - 'rules': Read-only triage rule set
        - 'store': Check-in store
        - 'transport': Outbound SMS transport
        - 'triage': SMSTriageService wired to the above
    """
    global _services
    with _services_lock:
        if _services is None:
            transport_name = _normalize_choice("D2BUFF_SMS_TRANSPORT", _SUPPORTED_TRANSPORTS, "log")
            rules = _build_rules()
            store = _build_store()
            transport = _build_transport(transport_name)
            _services = {
                "rules": rules,
                "store": store,
                "transport": transport,
                "triage": SMSTriageService(store=store, transport=transport, rules=rules),
            }
            log_event(
                component="settings",
                event="services_ready",
                details={"transport": transport_name, "languages": list(rules.languages)},
            )
    return _services


def reset_services() -> None:
    """Drop cached services so the next call re-reads the environment."""
    global _services
    with _services_lock:
        _services = None


def get_triage_service() -> SMSTriageService:
    return get_services()["triage"]


def get_transport() -> BaseSMSTransport:
    return get_services()["transport"]


def get_store() -> BaseCheckinStore:
    return get_services()["store"]
