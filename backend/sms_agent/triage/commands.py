"""Keyword commands that bypass symptom triage."""
from __future__ import annotations

from enum import Enum

from .templates import get_templates


class SMSCommand(str, Enum):
    HELP = "help"
    STOP = "stop"
    START = "start"


def detect_command(text: str) -> SMSCommand | None:
    """
    Detect a command before any symptom parsing.

    HELP and STOP match anywhere in the message, so "help, I have a fever" is a
    help request. START only matches a bare "start" so that messages such as
    "started bleeding" are still triaged.
    """
    lowered = text.lower()
    if "help" in lowered:
        return SMSCommand.HELP
    if "stop" in lowered:
        return SMSCommand.STOP
    if lowered.strip() == "start":
        return SMSCommand.START
    return None


def command_reply(command: SMSCommand, language: str | None = None) -> str:
    templates = get_templates(language)
    if command is SMSCommand.HELP:
        return templates.help
    if command is SMSCommand.STOP:
        return templates.stop
    return templates.start
