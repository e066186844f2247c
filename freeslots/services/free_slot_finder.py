"""
Application service for turning a calendar feed into free slots.

The service coordinates fetching events via a calendar client adapter,
runs the domain-level window computation and hands the formatted gaps to
the slot assistant. Both collaborators are described by protocols so tests
can swap them for stubs.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple

import pendulum
from pendulum import DateTime

from ..domain.gap_formatter import format_gaps
from ..domain.interval_subtractor import subtract_events
from ..domain.models import CalendarEvent, TimeWindow, WorkingHoursConfig
from ..domain.window_generator import DEFAULT_LOOKAHEAD_DAYS, generate_windows

logger = logging.getLogger(__name__)


class CalendarClientProtocol(Protocol):
    """Protocol describing the calendar client behaviour needed by the service."""

    def fetch_events(self, url: str, timezone: str) -> List[CalendarEvent]:
        """Return the events of the feed at ``url``."""


class SlotAssistantProtocol(Protocol):
    """Protocol describing the assistant that formats free slots."""

    def format_slots(self, prompt: str, raw_gaps: str) -> str:
        """Return the gaps filtered and formatted per ``prompt``."""


class FreeSlotService:
    """
    Orchestrates calendar retrieval, free-window computation and formatting.
    """

    def __init__(
        self,
        calendar_client: CalendarClientProtocol,
        slot_assistant: Optional[SlotAssistantProtocol] = None,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    ) -> None:
        self._calendar_client = calendar_client
        self._slot_assistant = slot_assistant
        self._lookahead_days = lookahead_days

    def find_free_windows(
        self,
        *,
        ics_link: str,
        working_hours: WorkingHoursConfig,
        now: Optional[DateTime] = None,
    ) -> Tuple[TimeWindow, ...]:
        """
        Fetch the feed and compute the free windows of the lookahead horizon.
        """
        events = self._calendar_client.fetch_events(ics_link, working_hours.timezone)
        return self.calculate_free_windows(
            events=events,
            working_hours=working_hours,
            now=now,
        )

    def calculate_free_windows(
        self,
        *,
        events: List[CalendarEvent],
        working_hours: WorkingHoursConfig,
        now: Optional[DateTime] = None,
    ) -> Tuple[TimeWindow, ...]:
        """Subtract ``events`` from the candidate working-hour windows."""
        current = now or pendulum.now(working_hours.timezone)

        candidates = generate_windows(working_hours, current, self._lookahead_days)
        windows = subtract_events(candidates, events, working_hours.timezone)

        logger.debug(
            "%d candidate windows, %d events, %d free windows",
            len(candidates),
            len(events),
            len(windows),
        )
        return windows

    def raw_gaps(
        self,
        *,
        ics_link: str,
        working_hours: WorkingHoursConfig,
        now: Optional[DateTime] = None,
    ) -> str:
        """Return the free windows as plain text, one per line."""
        windows = self.find_free_windows(
            ics_link=ics_link,
            working_hours=working_hours,
            now=now,
        )
        return format_gaps(windows)

    def generate_slots(
        self,
        *,
        ics_link: str,
        working_hours: WorkingHoursConfig,
        prompt: str,
        now: Optional[DateTime] = None,
    ) -> str:
        """
        Run the full pipeline and return the assistant's answer.

        Raises:
            RuntimeError: If the service was built without a slot assistant
        """
        if self._slot_assistant is None:
            raise RuntimeError("No slot assistant configured")

        gaps = self.raw_gaps(
            ics_link=ics_link,
            working_hours=working_hours,
            now=now,
        )
        return self._slot_assistant.format_slots(prompt, gaps)
