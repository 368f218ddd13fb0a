"""Reply templates, wellness tips and home-care remedies for SMS check-ins."""
from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class ReplyTemplates:
    """One language's reply strings, as ``str.format`` templates."""

    green: str
    yellow: str
    red: str
    help: str
    stop: str
    start: str
    welcome: str
    not_registered: str
    processing_error: str
    emergency_alert: str
    health_reminder: str


ENGLISH_TEMPLATES = ReplyTemplates(
    green="Aarogya: All looks OK today. Tip: {tip} Reply CHECK to do a quick mood check.",
    yellow=(
        "Aarogya: Caution — we noticed {symptom}. Try home care: {remedy} "
        "Re-check in 24 hrs or reply HELP for more."
    ),
    red=(
        "Aarogya: ⚠️ Urgent — we found signs of {symptom}. Please contact a doctor or "
        "nearest clinic now. If you want, reply CALL to connect to a health worker."
    ),
    help=(
        "Aarogya: Send symptoms like: bleeding, fever, pain, sad, tired. Reply STOP to "
        "opt out. For emergency call local health services."
    ),
    stop="Aarogya: You have opted out of SMS alerts. Reply START to opt back in.",
    start="Aarogya: Welcome back! You can now receive health alerts. Send symptoms for guidance.",
    welcome=(
        "Aarogya: Namaste {name}! Welcome to Aarogya. Send your daily symptoms like: "
        '"bleeding" or "fever" or "sad". For help reply HELP.'
    ),
    not_registered="Aarogya: Phone number not registered. Please sign up in the app first.",
    processing_error=(
        "Aarogya: Sorry, there was an error processing your message. "
        "Please try again or contact support."
    ),
    emergency_alert=(
        "Aarogya Emergency Alert: {message} - Please check on your family member immediately."
    ),
    health_reminder="Aarogya Reminder: {reminder} Reply with your symptoms for health check.",
)

HINDI_TEMPLATES = replace(
    ENGLISH_TEMPLATES,
    green="आरोग्य: आज सब ठीक है। सुझाव: {tip} मूड चेक के लिए CHECK भेजें।",
    yellow="आरोग्य: सावधान — {symptom} दिखा। करें: {remedy} 24 घंटे में फिर चेक करें।",
    red="आरोग्य: ⚠️ जरूरी — {symptom} के लक्षण। तुरंत डॉक्टर से मिलें।",
    help="आरोग्य: लक्षण भेजें: खून, बुखार, दर्द, उदासी। बंद करने के लिए STOP भेजें।",
    stop="आरोग्य: आपने SMS अलर्ट बंद कर दिए हैं। फिर से शुरू करने के लिए START भेजें।",
    start="आरोग्य: फिर से स्वागत है! अब आपको स्वास्थ्य अलर्ट मिलेंगे। सलाह के लिए लक्षण भेजें।",
    welcome=(
        'आरोग्य: नमस्ते {name}! आरोग्य में आपका स्वागत है। अपने लक्षण भेजें: "खून" या '
        '"बुखार" या "उदासी"। मदद के लिए HELP भेजें।'
    ),
)

TEMPLATES: Mapping[str, ReplyTemplates] = MappingProxyType(
    {
        "english": ENGLISH_TEMPLATES,
        "hindi": HINDI_TEMPLATES,
    }
)

DEFAULT_LANGUAGE = "english"

GREEN_TIPS: tuple[str, ...] = (
    "Drink warm fluids and rest",
    "Take short walks when possible",
    "Eat nutritious meals regularly",
    "Get adequate sleep",
)

YELLOW_REMEDIES: Mapping[str, str] = MappingProxyType(
    {
        "pain": "Apply warm compress and rest",
        "urination_pain": "Drink plenty of water and cranberry juice",
        "cramping": "Gentle massage and warm bath",
        "low_mood": "Deep breathing exercises and talk to family",
    }
)

DEFAULT_REMEDY = "Rest and monitor symptoms"


def normalize_language(language: str | None) -> str:
    """Map a free-form language preference onto a known template set."""
    normalized = (language or "").strip().lower()
    if normalized in TEMPLATES:
        return normalized
    return DEFAULT_LANGUAGE


def get_templates(language: str | None = None) -> ReplyTemplates:
    return TEMPLATES[normalize_language(language)]
