"""
Tests for the FreeSlotService orchestration layer.
"""

import pendulum
import pytest

from freeslots.domain.models import CalendarEvent, WorkingHoursConfig
from freeslots.services.free_slot_finder import FreeSlotService

from stubs import StubCalendarClient, StubSlotAssistant

TZ = "Europe/Berlin"
ICS_LINK = "https://example.com/cal.ics"
NOW = pendulum.parse("2024-11-25 08:00", tz=TZ)  # Monday


def _working_hours(start_hour=9, end_hour=18):
    return WorkingHoursConfig(
        working_days=[1, 2, 3, 4, 5],
        start_hour=start_hour,
        end_hour=end_hour,
        timezone=TZ,
    )


def _event(start, end):
    return CalendarEvent(start=pendulum.parse(start, tz=TZ), end=pendulum.parse(end, tz=TZ))


def test_fetches_feed_in_configured_timezone(calendar_client):
    service = FreeSlotService(calendar_client=calendar_client, lookahead_days=1)

    service.find_free_windows(ics_link=ICS_LINK, working_hours=_working_hours(), now=NOW)

    assert calendar_client.calls == [{"url": ICS_LINK, "timezone": TZ}]


def test_event_inside_window_splits_monday():
    client = StubCalendarClient([_event("2024-11-25 10:00", "2024-11-25 11:00")])
    service = FreeSlotService(calendar_client=client, lookahead_days=1)

    windows = service.find_free_windows(ics_link=ICS_LINK, working_hours=_working_hours(), now=NOW)

    assert len(windows) == 2
    assert (windows[0].start.hour, windows[0].end.hour) == (9, 10)
    assert (windows[1].start.hour, windows[1].end.hour) == (11, 18)


def test_covering_event_removes_monday():
    client = StubCalendarClient([_event("2024-11-25 08:00", "2024-11-25 19:00")])
    service = FreeSlotService(calendar_client=client, lookahead_days=2)

    windows = service.find_free_windows(ics_link=ICS_LINK, working_hours=_working_hours(), now=NOW)

    assert len(windows) == 1
    assert windows[0].start == pendulum.parse("2024-11-26 09:00", tz=TZ)


def test_empty_working_hours_give_no_gaps(calendar_client, slot_assistant):
    service = FreeSlotService(calendar_client=calendar_client, slot_assistant=slot_assistant)

    gaps = service.raw_gaps(ics_link=ICS_LINK, working_hours=_working_hours(9, 9), now=NOW)

    assert gaps == ""


def test_generate_slots_passes_prompt_and_gaps_to_assistant():
    client = StubCalendarClient([_event("2024-11-25 10:00", "2024-11-25 11:00")])
    assistant = StubSlotAssistant(answer="- Monday (25 Nov): 9-10 a.m., 11 a.m.-6 p.m.")
    service = FreeSlotService(calendar_client=client, slot_assistant=assistant, lookahead_days=1)

    answer = service.generate_slots(
        ics_link=ICS_LINK,
        working_hours=_working_hours(),
        prompt="Only Monday",
        now=NOW,
    )

    assert answer == "- Monday (25 Nov): 9-10 a.m., 11 a.m.-6 p.m."
    assert assistant.calls == [
        {
            "prompt": "Only Monday",
            "raw_gaps": (
                "Monday (25 Nov): 9:00 AM - 10:00 AM\n"
                "Monday (25 Nov): 11:00 AM - 6:00 PM"
            ),
        }
    ]


def test_generate_slots_requires_assistant(calendar_client):
    service = FreeSlotService(calendar_client=calendar_client)

    with pytest.raises(RuntimeError):
        service.generate_slots(
            ics_link=ICS_LINK,
            working_hours=_working_hours(),
            prompt="anything",
            now=NOW,
        )


def test_defaults_to_current_time():
    """Without an explicit ``now`` no window starts in the past."""
    service = FreeSlotService(calendar_client=StubCalendarClient())
    before = pendulum.now(TZ)

    windows = service.find_free_windows(
        ics_link=ICS_LINK,
        working_hours=WorkingHoursConfig(working_days=range(1, 8), start_hour=0, end_hour=24, timezone=TZ),
    )

    assert windows
    assert windows[0].start >= before
