"""Pipeline orchestration for SMS check-ins."""
from .sms_pipeline import SMSReply, SMSTriageService

__all__ = ["SMSReply", "SMSTriageService"]
