"""Base class for check-in stores."""
import abc
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping


@dataclass(frozen=True)
class UserProfile:
    """Registered mother reachable over SMS."""

    id: str
    phone: str
    full_name: str | None = None
    preferred_language: str | None = None
    voice_sms_consent: bool = False


@dataclass(frozen=True)
class EmergencyContact:
    """Family member to alert on red-tier check-ins."""

    user_id: str
    name: str | None
    phone: str
    is_primary: bool = False


@dataclass(frozen=True)
class CheckinRecord:
    """One persisted SMS check-in."""

    user_id: str
    checkin_date: date
    original_text: str
    symptoms: tuple[str, ...]
    risk_level: str
    created_at: datetime
    insights: Mapping[str, Any] = field(default_factory=dict)


class CheckinStoreError(RuntimeError):
    """Raised when the backing store cannot complete an operation."""


class BaseCheckinStore(abc.ABC):
    """Abstract base class for user profile and check-in persistence."""

    @abc.abstractmethod
    def find_user_by_phone(self, phone: str) -> UserProfile | None:
        """
        Look up a registered user.

        :param phone: Sender phone number as received from the SMS provider
        :return: Profile, or None when the number is not registered
        """
        pass

    @abc.abstractmethod
    def store_checkin(self, record: CheckinRecord) -> None:
        pass

    @abc.abstractmethod
    def update_sms_consent(self, phone: str, consent: bool) -> bool:
        """
        Update SMS consent for every profile registered under ``phone``.

        :return: True when at least one profile was updated
        """
        pass

    @abc.abstractmethod
    def has_sms_consent(self, user_id: str) -> bool:
        pass

    @abc.abstractmethod
    def get_primary_emergency_contact(self, user_id: str) -> EmergencyContact | None:
        pass
