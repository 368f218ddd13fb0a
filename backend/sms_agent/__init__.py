"""
SMS Agent Package for D2Buff postpartum check-ins.

D2Buff ("Day-2 Buffer") is the SMS fallback channel: mothers text their
symptoms and get a templated reply back. This package provides:
- Keyword-based symptom extraction and green/yellow/red risk tiers
- Templated replies, including HELP/STOP/START commands
- Check-in persistence and emergency alerts to family contacts

Main entry point:
    SMSTriageService: one inbound message in, one reply out

Core components:
    - triage: Keyword tables, risk rules, templates and reply generation
    - pipelines: Inbound SMS orchestration
    - services: Check-in store and outbound SMS transports
    - core: Schemas, structured logging and error codes
    - config: Service configuration and factory
"""

# Main pipeline (primary public API)
from .pipelines import SMSReply, SMSTriageService

# Pure triage functions
from .triage import (
    RiskLevel,
    TriageResult,
    assess_risk_level,
    extract_symptoms,
    generate_response,
    triage_text,
)

# Configuration (for service initialization)
from .config import get_services, get_store, get_transport, get_triage_service

__all__ = [
    # Main pipeline
    "SMSReply",
    "SMSTriageService",
    # Triage
    "RiskLevel",
    "TriageResult",
    "assess_risk_level",
    "extract_symptoms",
    "generate_response",
    "triage_text",
    # Config
    "get_services",
    "get_store",
    "get_transport",
    "get_triage_service",
]

__version__ = "1.0.0"
