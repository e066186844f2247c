"""
Adapters layer - External integrations (ICS feeds, OpenAI, usage log).
"""

from .ics_client import IcsCalendarClient, parse_ics
from .slot_assistant import OpenAISlotAssistant
from .usage_log import JsonlUsageLogStore, NullUsageLogStore, record_usage

__all__ = [
    "IcsCalendarClient",
    "JsonlUsageLogStore",
    "NullUsageLogStore",
    "OpenAISlotAssistant",
    "parse_ics",
    "record_usage",
]
