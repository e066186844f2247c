"""
Domain-specific exception hierarchy for the free slot finder.
"""


class FreeSlotsError(Exception):
    """Base class for all application-level errors."""


class CalendarFetchError(FreeSlotsError):
    """Raised when the calendar feed cannot be retrieved."""


class CalendarParseError(FreeSlotsError):
    """Raised when the calendar feed cannot be parsed."""


class AssistantError(FreeSlotsError):
    """Raised when the slot assistant fails to produce an answer."""
