"""Unit tests for icsgantt.loader."""

from datetime import datetime

import pytest

from icsgantt.exceptions import FetchError, ParseError
from icsgantt.loader import CalendarLoader, apply_offset
from icsgantt.models import DayOffset

pytestmark = pytest.mark.unit

CALENDAR_URL = "https://calendar.example.com/team.ics"


class TestApplyOffset:
    """Tests for the uniform day offset."""

    def test_apply_offset_when_defaults_then_start_moves_back_five_days(
        self, standup_offsite_events
    ):
        adjusted = apply_offset(standup_offsite_events, DayOffset())

        assert adjusted[0].start == datetime(2024, 1, 5, 9, 0)
        assert adjusted[0].end == datetime(2024, 1, 10, 9, 0)

    def test_apply_offset_when_both_offsets_then_range_widened_on_both_sides(
        self, standup_offsite_events
    ):
        adjusted = apply_offset(standup_offsite_events, DayOffset(start=2, end=3))

        offsite = adjusted[1]
        assert offsite.start == datetime(2024, 1, 9, 0, 0)
        assert offsite.end == datetime(2024, 1, 15, 0, 0)

    def test_apply_offset_when_zero_then_values_unchanged(self, standup_offsite_events):
        adjusted = apply_offset(standup_offsite_events, DayOffset(start=0, end=0))

        assert adjusted == standup_offsite_events

    def test_apply_offset_when_called_then_input_not_mutated(self, standup_offsite_events):
        original_start = standup_offsite_events[0].start

        adjusted = apply_offset(standup_offsite_events, DayOffset(start=10, end=10))

        assert standup_offsite_events[0].start == original_start
        assert adjusted[0] is not standup_offsite_events[0]

    def test_apply_offset_when_other_fields_then_carried_over(self, make_event):
        event = make_event(
            datetime(2024, 1, 11),
            datetime(2024, 1, 12),
            summary="Offsite",
            description="Planning day",
            location="Lake House",
        )

        adjusted = apply_offset([event], DayOffset(start=1, end=1))[0]

        assert adjusted.summary == "Offsite"
        assert adjusted.description == "Planning day"
        assert adjusted.location == "Lake House"


class TestCalendarLoader:
    """Tests for CalendarLoader.load."""

    async def test_load_when_offset_zero_then_events_match_document(
        self, fake_fetcher_factory, sample_ics_standup_offsite
    ):
        fetcher = fake_fetcher_factory({CALENDAR_URL: sample_ics_standup_offsite})
        loader = CalendarLoader(fetcher)

        events = await loader.load(CALENDAR_URL, DayOffset(start=0, end=0))

        assert fetcher.requested == [CALENDAR_URL]
        assert [(e.summary, e.start, e.end) for e in events] == [
            ("Standup", datetime(2024, 1, 10, 9, 0), datetime(2024, 1, 10, 9, 0)),
            ("Offsite", datetime(2024, 1, 11, 0, 0), datetime(2024, 1, 12, 0, 0)),
        ]

    async def test_load_when_no_offset_given_then_defaults_applied(
        self, fake_fetcher_factory, sample_ics_standup_offsite
    ):
        loader = CalendarLoader(fake_fetcher_factory({CALENDAR_URL: sample_ics_standup_offsite}))

        events = await loader.load(CALENDAR_URL)

        assert events[1].start == datetime(2024, 1, 6, 0, 0)
        assert events[1].end == datetime(2024, 1, 12, 0, 0)

    async def test_load_when_calendar_empty_then_empty_list(
        self, fake_fetcher_factory, sample_ics_empty_calendar
    ):
        loader = CalendarLoader(fake_fetcher_factory({CALENDAR_URL: sample_ics_empty_calendar}))

        assert await loader.load(CALENDAR_URL) == []

    async def test_load_when_fetch_fails_then_fetch_error_propagates(self, fake_fetcher_factory):
        loader = CalendarLoader(fake_fetcher_factory({}))

        with pytest.raises(FetchError) as exc_info:
            await loader.load(CALENDAR_URL)

        assert exc_info.value.status_code == 404

    async def test_load_when_body_not_calendar_then_parse_error_propagates(
        self, fake_fetcher_factory
    ):
        loader = CalendarLoader(fake_fetcher_factory({CALENDAR_URL: "not a calendar"}))

        with pytest.raises(ParseError):
            await loader.load(CALENDAR_URL)
