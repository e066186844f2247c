"""
Subtraction of busy calendar events from free windows.

Each event is removed from the running window tuple in turn; every step
returns a new tuple, so the whole pass is a fold over the events.
"""

from functools import reduce
from typing import Iterable, List, Tuple

from .models import CalendarEvent, TimeWindow


def subtract_event(
    windows: Tuple[TimeWindow, ...],
    event: CalendarEvent,
    timezone: str,
) -> Tuple[TimeWindow, ...]:
    """
    Remove a single busy event from the free windows.

    Example:
    Window: 09:00 - 18:00
    Event: 10:00 - 11:00
    Result: [09:00-10:00, 11:00-18:00]

    Events that do not block time (see ``CalendarEvent.is_busy``) leave the
    windows untouched.
    """
    if not event.is_busy:
        return windows

    busy = TimeWindow(
        start=event.start.in_timezone(timezone),
        end=event.end.in_timezone(timezone),
    )

    remaining: List[TimeWindow] = []

    for window in windows:
        if not window.overlaps(busy):
            remaining.append(window)
            continue

        # Keep the parts on either side of the event; the covered middle is dropped
        if window.start < busy.start:
            remaining.append(TimeWindow(start=window.start, end=busy.start))
        if window.end > busy.end:
            remaining.append(TimeWindow(start=busy.end, end=window.end))

    return tuple(remaining)


def subtract_events(
    windows: Iterable[TimeWindow],
    events: Iterable[CalendarEvent],
    timezone: str,
) -> Tuple[TimeWindow, ...]:
    """Remove every busy event from the free windows."""
    return reduce(
        lambda current, event: subtract_event(current, event, timezone),
        events,
        tuple(windows),
    )
