"""Common type definitions for the SMS agent."""
from typing import Dict, List, Literal

# Type aliases for clarity
RiskLevelName = Literal["green", "yellow", "red"]
CommandName = Literal["help", "stop", "start"]
SymptomTags = List[str]
ErrorPayload = Dict[str, str]  # {"code": ..., "message": ..., "details": ...}
