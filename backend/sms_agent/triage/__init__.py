"""Symptom triage rules, commands and reply generation."""
from .commands import SMSCommand, command_reply, detect_command
from .responses import RandomSource, generate_response, pick_green_tip
from .rules import (
    DEFAULT_RULES,
    RiskLevel,
    TriageResult,
    TriageRules,
    assess_risk_level,
    build_triage_rules,
    extract_symptoms,
    triage_text,
)
from .templates import GREEN_TIPS, YELLOW_REMEDIES, get_templates, normalize_language

__all__ = [
    "SMSCommand",
    "command_reply",
    "detect_command",
    "RandomSource",
    "generate_response",
    "pick_green_tip",
    "DEFAULT_RULES",
    "RiskLevel",
    "TriageResult",
    "TriageRules",
    "assess_risk_level",
    "build_triage_rules",
    "extract_symptoms",
    "triage_text",
    "GREEN_TIPS",
    "YELLOW_REMEDIES",
    "get_templates",
    "normalize_language",
]
