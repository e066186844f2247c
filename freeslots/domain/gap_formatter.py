"""
Plain-text rendering of free windows.
"""

from typing import Iterable

from .models import TimeWindow

DAY_FORMAT = "dddd (D MMM)"
TIME_FORMAT = "h:mm A"
LOCALE = "en"


def format_window(window: TimeWindow) -> str:
    """
    Format a window for display.
    Format: Monday (2 Mar): 9:00 AM - 10:00 AM
    """
    day = window.start.format(DAY_FORMAT, locale=LOCALE)
    start = window.start.format(TIME_FORMAT, locale=LOCALE)
    end = window.end.format(TIME_FORMAT, locale=LOCALE)
    return f"{day}: {start} - {end}"


def format_gaps(windows: Iterable[TimeWindow]) -> str:
    """One line per window, in window order."""
    return "\n".join(format_window(window) for window in windows)
