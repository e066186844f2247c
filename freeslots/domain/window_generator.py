"""
Candidate free windows for the lookahead horizon.

Pure domain logic: one window per working day, bounded by the configured
working hours and by the current instant.
"""

from typing import List, Optional, Tuple

from pendulum import DateTime

from .models import TimeWindow, WorkingHoursConfig

DEFAULT_LOOKAHEAD_DAYS = 30

MIDNIGHT_NEXT_DAY = 24


def _at_hour(day: DateTime, hour: int) -> DateTime:
    """
    Return ``day`` at ``hour``:00:00.000.

    Hour 24 is the start of the following day rather than an overflow of
    the hour field.
    """
    if hour == MIDNIGHT_NEXT_DAY:
        return day.start_of("day").add(days=1)
    return day.set(hour=hour, minute=0, second=0, microsecond=0)


def working_window_for_day(
    config: WorkingHoursConfig,
    day: DateTime,
    now: DateTime,
) -> Optional[TimeWindow]:
    """
    Build the remaining working window of ``day``.

    Returns None for non-working days, for days whose working hours already
    ended, and when the configured hours describe an empty window.
    """
    if not config.is_working_day(day):
        return None

    window_start = _at_hour(day, config.start_hour)
    window_end = _at_hour(day, config.end_hour)

    if window_end <= now:
        return None

    # Today's window only covers what is left of it
    if window_start < now:
        window_start = now

    if window_start >= window_end:
        return None

    return TimeWindow(start=window_start, end=window_end)


def generate_windows(
    config: WorkingHoursConfig,
    now: DateTime,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
) -> Tuple[TimeWindow, ...]:
    """
    Generate candidate free windows, one per working day.

    Args:
        config: Working days, hours and timezone
        now: Current instant; converted to the configured timezone
        lookahead_days: Number of days to consider, starting with today

    Returns:
        Windows ordered by start, none of them empty or in the past
    """
    if lookahead_days <= 0:
        raise ValueError(f"lookahead_days must be greater than zero, got {lookahead_days}")

    local_now = now.in_timezone(config.timezone)
    windows: List[TimeWindow] = []

    for offset in range(lookahead_days):
        day = local_now.add(days=offset)
        window = working_window_for_day(config, day, local_now)
        if window:
            windows.append(window)

    return tuple(windows)
