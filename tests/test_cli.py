"""
Tests for the command-line interface.
"""

import pendulum
import pytest
from typer.testing import CliRunner

from freeslots.cli import app as cli_module
from freeslots.domain.exceptions import CalendarFetchError
from freeslots.domain.models import CalendarEvent
from freeslots.services.free_slot_finder import FreeSlotService

from stubs import StubCalendarClient, StubSlotAssistant

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("defaults:\n  timezone: Europe/Berlin\nusage_log:\n  enabled: false\n", encoding="utf-8")
    return path


def _use_service(monkeypatch, service):
    monkeypatch.setattr(cli_module, "build_service", lambda config: service)


def test_gaps_lists_free_windows(monkeypatch, config_file):
    _use_service(monkeypatch, FreeSlotService(calendar_client=StubCalendarClient(), lookahead_days=2))

    result = runner.invoke(
        cli_module.app,
        ["gaps", "https://example.com/cal.ics", "-c", str(config_file),
         "--days", "1,2,3,4,5,6,7", "--start", "0", "--end", "24"],
    )

    assert result.exit_code == 0
    assert "free window(s) found" in result.output
    tomorrow = pendulum.now("Europe/Berlin").add(days=1).format("dddd (D MMM)", locale="en")
    assert tomorrow in result.output


def test_gaps_reports_no_windows(monkeypatch, config_file):
    _use_service(monkeypatch, FreeSlotService(calendar_client=StubCalendarClient()))

    result = runner.invoke(
        cli_module.app,
        ["gaps", "https://example.com/cal.ics", "-c", str(config_file), "--start", "9", "--end", "9"],
    )

    assert result.exit_code == 0
    assert "No free windows found" in result.output


def test_gaps_fetch_failure_exits_with_error(monkeypatch, config_file):
    client = StubCalendarClient(error=CalendarFetchError("Failed to fetch the ICS link: 404"))
    _use_service(monkeypatch, FreeSlotService(calendar_client=client))

    result = runner.invoke(cli_module.app, ["gaps", "https://example.com/cal.ics", "-c", str(config_file)])

    assert result.exit_code == 1
    assert "Failed to fetch the ICS link" in result.output


def test_invalid_days_rejected(config_file):
    result = runner.invoke(
        cli_module.app,
        ["gaps", "https://example.com/cal.ics", "-c", str(config_file), "--days", "1,x"],
    )

    assert result.exit_code == 2


def test_out_of_range_hour_rejected(config_file):
    result = runner.invoke(
        cli_module.app,
        ["gaps", "https://example.com/cal.ics", "-c", str(config_file), "--end", "25"],
    )

    assert result.exit_code == 2


def test_overrides_merged_with_configured_defaults(config_file):
    config = cli_module.AppConfig.load(config_file)

    working_hours = cli_module._resolve_working_hours(
        config, days="6,7", start_hour=10, end_hour=None, timezone=None
    )

    assert working_hours.working_days == frozenset({6, 7})
    assert (working_hours.start_hour, working_hours.end_hour) == (10, 18)
    assert working_hours.timezone == "Europe/Berlin"


def test_generate_uses_default_prompt(monkeypatch, config_file):
    busy = CalendarEvent(
        start=pendulum.now("Europe/Berlin").subtract(days=1),
        end=pendulum.now("Europe/Berlin").subtract(hours=23),
    )
    assistant = StubSlotAssistant(answer="- Monday (25 Nov): 9-10 a.m.")
    _use_service(
        monkeypatch,
        FreeSlotService(calendar_client=StubCalendarClient([busy]), slot_assistant=assistant),
    )

    result = runner.invoke(cli_module.app, ["generate", "https://example.com/cal.ics", "-c", str(config_file)])

    assert result.exit_code == 0
    assert "- Monday (25 Nov): 9-10 a.m." in result.output
    assert assistant.calls[0]["prompt"] == "Give me my free slots for the next 5 working days"


def test_version():
    result = runner.invoke(cli_module.app, ["version"])

    assert result.exit_code == 0
    assert "freeslots" in result.output
