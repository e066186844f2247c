"""
Construction of the service and its collaborators from configuration.
"""

from ..adapters.ics_client import IcsCalendarClient
from ..adapters.slot_assistant import OpenAISlotAssistant
from ..adapters.usage_log import JsonlUsageLogStore, NullUsageLogStore, UsageLogStore
from ..config import AppConfig
from .free_slot_finder import FreeSlotService


def build_service(config: AppConfig) -> FreeSlotService:
    """Wire the ICS client and the OpenAI assistant into a service."""
    calendar_client = IcsCalendarClient(timeout=config.calendar.timeout_seconds)
    slot_assistant = OpenAISlotAssistant(
        api_key=config.assistant.get_api_key(),
        model=config.assistant.model,
        temperature=config.assistant.temperature,
        timeout=config.assistant.timeout_seconds,
    )
    return FreeSlotService(
        calendar_client=calendar_client,
        slot_assistant=slot_assistant,
        lookahead_days=config.lookahead_days,
    )


def build_usage_store(config: AppConfig) -> UsageLogStore:
    """Return the configured usage log, or a no-op store when disabled."""
    if not config.usage_log.enabled:
        return NullUsageLogStore()
    return JsonlUsageLogStore(config.usage_log.path)
