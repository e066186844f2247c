"""
Domain models for working hours, free windows and calendar events.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

import pendulum
from pendulum import DateTime

VEVENT = "VEVENT"


def validate_timezone(name: str) -> str:
    """
    Ensure ``name`` is a known IANA timezone identifier.

    Raises:
        ValueError: If the timezone cannot be resolved
    """
    try:
        pendulum.timezone(name)
    except (ValueError, KeyError, OSError) as exc:
        raise ValueError(f"Unknown timezone: {name}") from exc
    return name


@dataclass(frozen=True)
class TimeWindow:
    """
    Represents an immutable span of time with a zoned start and end.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeWindow") -> bool:
        """Check if this window overlaps with another."""
        return self.start < other.end and self.end > other.start


@dataclass(frozen=True)
class WorkingHoursConfig:
    """
    Working days and hours used to build candidate windows.

    ``working_days`` uses ISO weekday numbers (1=Monday, 7=Sunday).
    ``end_hour`` may be 24, meaning midnight of the following day.
    """
    working_days: FrozenSet[int]
    start_hour: int = 9
    end_hour: int = 18
    timezone: str = "UTC"

    def __post_init__(self):
        # Accept any iterable of weekdays but store a frozenset
        object.__setattr__(self, "working_days", frozenset(self.working_days))
        self._validate()

    def _validate(self) -> None:
        if not self.working_days:
            raise ValueError("At least one working day is required")
        invalid_days = sorted(day for day in self.working_days if day not in range(1, 8))
        if invalid_days:
            raise ValueError(f"Working days must be between 1 and 7, got {invalid_days}")
        if not 0 <= self.start_hour <= 23:
            raise ValueError(f"Start hour must be between 0 and 23, got {self.start_hour}")
        if not 0 <= self.end_hour <= 24:
            raise ValueError(f"End hour must be between 0 and 24, got {self.end_hour}")
        validate_timezone(self.timezone)

    def is_working_day(self, dt: DateTime) -> bool:
        """Check if a given datetime falls on a working day."""
        return dt.isoweekday() in self.working_days


@dataclass(frozen=True)
class CalendarEvent:
    """
    An event read from a calendar feed.

    Start and end are optional because feeds may omit them; such events
    never count as busy time.
    """
    start: Optional[DateTime]
    end: Optional[DateTime]
    kind: str = VEVENT
    summary: str = field(default="", compare=False)

    @property
    def is_busy(self) -> bool:
        """Whether this event blocks time in the free-window computation."""
        return (
            self.kind == VEVENT
            and self.start is not None
            and self.end is not None
            and self.end > self.start
        )
