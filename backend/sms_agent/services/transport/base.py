"""Base class for outbound SMS transports."""
import abc

from ...triage.templates import get_templates


class SMSTransportError(RuntimeError):
    """Raised when a transport is misconfigured or the provider rejects a send."""


class BaseSMSTransport(abc.ABC):
    """Abstract base class for SMS senders."""

    @abc.abstractmethod
    def send_message(self, to: str, body: str) -> bool:
        """
        Send one text message.

        :param to: Destination phone number in E.164 form
        :param body: Message text
        :return: True if the provider accepted the message
        """
        pass

    def send_welcome_sms(self, to: str, name: str, language: str | None = None) -> bool:
        return self.send_message(to, get_templates(language).welcome.format(name=name))

    def send_emergency_sms(self, to: str, message: str) -> bool:
        return self.send_message(to, get_templates().emergency_alert.format(message=message))

    def send_health_reminder(self, to: str, reminder: str) -> bool:
        return self.send_message(to, get_templates().health_reminder.format(reminder=reminder))
