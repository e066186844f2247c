"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import AssistantError, CalendarFetchError, CalendarParseError, FreeSlotsError
from .gap_formatter import format_gaps, format_window
from .interval_subtractor import subtract_event, subtract_events
from .models import CalendarEvent, TimeWindow, WorkingHoursConfig
from .window_generator import DEFAULT_LOOKAHEAD_DAYS, generate_windows

__all__ = [
    "AssistantError",
    "CalendarEvent",
    "CalendarFetchError",
    "CalendarParseError",
    "DEFAULT_LOOKAHEAD_DAYS",
    "FreeSlotsError",
    "TimeWindow",
    "WorkingHoursConfig",
    "format_gaps",
    "format_window",
    "generate_windows",
    "subtract_event",
    "subtract_events",
]
