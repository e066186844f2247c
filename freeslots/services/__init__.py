"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .factory import build_service, build_usage_store
from .free_slot_finder import CalendarClientProtocol, FreeSlotService, SlotAssistantProtocol

__all__ = [
    "CalendarClientProtocol",
    "FreeSlotService",
    "SlotAssistantProtocol",
    "build_service",
    "build_usage_store",
]
