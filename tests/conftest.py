"""Shared fixtures for icsgantt tests."""

from datetime import datetime
from typing import Callable, Optional

import asyncio

import pytest

from icsgantt.exceptions import FetchError
from icsgantt.loader import CalendarLoader
from icsgantt.models import CalendarEvent
from icsgantt.session import TimelineSession


class FakeFetcher:
    """Stand-in for ICSFetcher that serves fixed content per URL."""

    def __init__(self, content_by_url: Optional[dict[str, str]] = None) -> None:
        self.content_by_url = content_by_url or {}
        self.requested: list[str] = []
        self.closed = False

    async def fetch_text(self, url: str) -> str:
        self.requested.append(url)
        if url not in self.content_by_url:
            raise FetchError("HTTP error! Status: 404", 404)
        return self.content_by_url[url]

    async def close(self) -> None:
        self.closed = True


class BlockingFetcher:
    """Fetcher that holds its response until ``release`` is set."""

    def __init__(self, content: str) -> None:
        self.content = content
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def fetch_text(self, _url: str) -> str:
        self.started.set()
        await self.release.wait()
        return self.content

    async def close(self) -> None:
        pass


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Return a builder for CalendarEvent records."""

    def builder(
        start: datetime,
        end: datetime,
        summary: Optional[str] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> CalendarEvent:
        return CalendarEvent(
            summary=summary,
            start=start,
            end=end,
            description=description,
            location=location,
        )

    return builder


@pytest.fixture
def standup_offsite_events(make_event: Callable[..., CalendarEvent]) -> list[CalendarEvent]:
    """Two events: a zero-length standup and a one-day offsite."""
    return [
        make_event(datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 9, 0), summary="Standup"),
        make_event(datetime(2024, 1, 11, 0, 0), datetime(2024, 1, 12, 0, 0), summary="Offsite"),
    ]


@pytest.fixture
def sample_ics_simple() -> str:
    """
    Return a simple ICS calendar string with a single event.

    - Event: "Team Meeting" on 2024-01-15 10:00-11:00 UTC
    - Includes DTSTART, DTEND, SUMMARY, LOCATION, DESCRIPTION
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//icsgantt Test//EN
CALSCALE:GREGORIAN
BEGIN:VEVENT
UID:test-event-001@icsgantt.test
DTSTART:20240115T100000Z
DTEND:20240115T110000Z
SUMMARY:Team Meeting
LOCATION:Conference Room A
DESCRIPTION:Weekly team sync meeting
DTSTAMP:20240115T090000Z
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_standup_offsite() -> str:
    """Return an ICS calendar with the Standup and Offsite events (floating times)."""
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//icsgantt Test//EN
BEGIN:VEVENT
UID:standup@icsgantt.test
DTSTART:20240110T090000
DTEND:20240110T090000
SUMMARY:Standup
DTSTAMP:20240101T000000Z
END:VEVENT
BEGIN:VEVENT
UID:offsite@icsgantt.test
DTSTART:20240111T000000
DTEND:20240112T000000
SUMMARY:Offsite
DESCRIPTION:Planning day
LOCATION:Lake House
DTSTAMP:20240101T000000Z
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_mixed() -> str:
    """Return an ICS calendar covering end-value variants.

    - All-day event with DTEND
    - All-day event without DTEND or DURATION
    - Timed event with DURATION
    - Timed event without DTEND or DURATION and without SUMMARY
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//icsgantt Test//EN
BEGIN:VEVENT
UID:allday-range@icsgantt.test
DTSTART;VALUE=DATE:20240301
DTEND;VALUE=DATE:20240304
SUMMARY:Conference
DTSTAMP:20240101T000000Z
END:VEVENT
BEGIN:VEVENT
UID:allday-single@icsgantt.test
DTSTART;VALUE=DATE:20240310
SUMMARY:Holiday
DTSTAMP:20240101T000000Z
END:VEVENT
BEGIN:VEVENT
UID:duration@icsgantt.test
DTSTART:20240312T220000
DURATION:PT4H
SUMMARY:Night shift
DTSTAMP:20240101T000000Z
END:VEVENT
BEGIN:VEVENT
UID:instant@icsgantt.test
DTSTART:20240315T080000
DTSTAMP:20240101T000000Z
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_empty_calendar() -> str:
    """Return a valid VCALENDAR without any VEVENT."""
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//icsgantt Test//EN
END:VCALENDAR
"""


@pytest.fixture
def fake_fetcher_factory() -> Callable[[dict[str, str]], FakeFetcher]:
    return FakeFetcher


@pytest.fixture
def blocking_fetcher_factory() -> Callable[[str], BlockingFetcher]:
    return BlockingFetcher


@pytest.fixture
def make_session() -> Callable[[dict[str, str]], TimelineSession]:
    """Return a builder for sessions backed by a FakeFetcher."""

    def builder(content_by_url: dict[str, str]) -> TimelineSession:
        return TimelineSession(CalendarLoader(FakeFetcher(content_by_url)))

    return builder
