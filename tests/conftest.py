"""
Shared fixtures for the service and API tests.
"""

import pytest

from stubs import StubCalendarClient, StubSlotAssistant


@pytest.fixture
def calendar_client():
    return StubCalendarClient()


@pytest.fixture
def slot_assistant():
    return StubSlotAssistant()
