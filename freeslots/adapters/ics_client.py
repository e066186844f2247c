"""
Client for public ICS calendar feeds.
"""

import logging
from datetime import date, datetime, timedelta, timezone as dt_timezone
from typing import Any, List, Optional, Union

import pendulum
import requests
from icalendar import Calendar
from pendulum import DateTime

from ..domain.exceptions import CalendarFetchError, CalendarParseError
from ..domain.models import VEVENT, CalendarEvent

logger = logging.getLogger(__name__)


class IcsCalendarClient:
    """
    Fetches an iCalendar feed over HTTP and turns its VEVENTs into
    ``CalendarEvent`` objects in the requested timezone.

    Recurrence rules are not expanded; each VEVENT yields one event.
    """

    DEFAULT_TIMEOUT = 30.0
    ACCEPT_HEADER = "text/calendar, text/plain;q=0.9, */*;q=0.8"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        """
        Initialize the ICS client.

        Args:
            timeout: Seconds to wait for the calendar server
            session: Optional requests session (defaults to module-level requests)
        """
        self.timeout = timeout
        self._http = session or requests

    def fetch_events(self, url: str, timezone: str) -> List[CalendarEvent]:
        """
        Download and parse the feed at ``url``.

        Raises:
            CalendarFetchError: If the feed cannot be retrieved
            CalendarParseError: If the feed is not valid iCalendar data
        """
        return parse_ics(self.fetch_ics(url), timezone)

    def fetch_ics(self, url: str) -> bytes:
        """
        Download the raw feed.

        Raises:
            CalendarFetchError: On network errors or a non-success status
        """
        fetch_url = normalize_feed_url(url)

        try:
            response = self._http.get(
                fetch_url,
                headers={"Accept": self.ACCEPT_HEADER},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning("Could not fetch calendar feed %s: %s", fetch_url, e)
            raise CalendarFetchError(f"Failed to fetch the ICS link: {e}") from e

        return response.content


def normalize_feed_url(url: str) -> str:
    """Rewrite ``webcal://`` links to ``https://``; other URLs are returned as-is."""
    if url.lower().startswith("webcal://"):
        return "https://" + url[len("webcal://"):]
    return url


def parse_ics(data: Union[str, bytes], timezone: str) -> List[CalendarEvent]:
    """
    Parse an iCalendar document into calendar events.

    DTEND falls back to DTSTART + DURATION, and all-day events without
    either last one day. Date-only and floating times are read in
    ``timezone``; zoned times are converted to it.

    Raises:
        CalendarParseError: If the document cannot be parsed
    """
    try:
        calendar = Calendar.from_ical(data)
    except (ValueError, IndexError, KeyError) as exc:
        raise CalendarParseError(f"Could not parse calendar feed: {exc}") from exc

    events: List[CalendarEvent] = []

    for component in calendar.walk(VEVENT):
        try:
            events.append(_parse_event(component, timezone))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping unreadable event %r: %s", component.get("uid"), e)
            continue

    logger.debug("Parsed %d events from calendar feed", len(events))
    return events


def _parse_event(component: Any, timezone: str) -> CalendarEvent:
    dtstart = component.get("dtstart")
    dtend = component.get("dtend")
    duration = component.get("duration")

    start = _to_datetime(dtstart.dt, timezone) if dtstart is not None else None
    end: Optional[DateTime] = None

    if dtend is not None:
        end = _to_datetime(dtend.dt, timezone)
    elif start is not None and duration is not None:
        end = start + duration.dt
    elif start is not None and _is_date_only(dtstart.dt):
        end = start.add(days=1)

    return CalendarEvent(
        start=start,
        end=end,
        kind=component.name,
        summary=str(component.get("summary", "")),
    )


def _is_date_only(value: Any) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def _to_datetime(value: Any, timezone: str) -> DateTime:
    """
    Convert an iCalendar date or datetime to a pendulum DateTime in ``timezone``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            # Floating time: wall clock of the calendar owner
            return pendulum.instance(value, tz=timezone)
        return pendulum.instance(value.astimezone(dt_timezone.utc)).in_timezone(timezone)

    if isinstance(value, date):
        return pendulum.datetime(value.year, value.month, value.day, tz=timezone)

    if isinstance(value, timedelta):
        raise ValueError("Relative start or end times are not supported")

    raise TypeError(f"Unsupported date value: {value!r}")
