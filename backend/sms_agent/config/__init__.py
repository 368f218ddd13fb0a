"""Configuration module for the SMS agent."""
from .settings import (
    get_bool_setting,
    get_services,
    get_store,
    get_transport,
    get_triage_service,
    reset_services,
)

__all__ = [
    "get_bool_setting",
    "get_services",
    "get_store",
    "get_transport",
    "get_triage_service",
    "reset_services",
]
