"""iCalendar parsing into flat CalendarEvent records."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from icalendar import Calendar
from icalendar.error import BrokenCalendarProperty

from .exceptions import ParseError
from .models import CalendarEvent

logger = logging.getLogger(__name__)


def _text_or_none(prop: Any) -> Optional[str]:
    """Return an icalendar text property as str, or None when absent.

    A repeated property comes back from icalendar as a list; the first
    occurrence wins.
    """
    if isinstance(prop, list):
        prop = prop[0] if prop else None
    if prop is None:
        return None
    return str(prop)


def _prop_value(component: Any, prop_name: str, uid: str) -> Any:
    """Return the decoded value of a date or duration property, or None.

    Raises:
        ParseError: the property is present but its value is malformed
    """
    prop = component.get(prop_name)
    if prop is None:
        return None
    try:
        return prop.dt
    except (BrokenCalendarProperty, AttributeError, ValueError) as e:
        raise ParseError(f"Event {uid}: invalid {prop_name}") from e


def _to_datetime(value: Any, prop_name: str, uid: str) -> datetime:
    """Normalize a DTSTART/DTEND value to a datetime.

    Date-only values (all-day events) become midnight of that date. The
    timezone of datetime values is kept as the parser produced it.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise ParseError(f"Event {uid}: unsupported {prop_name} value {value!r}")


class ICSParser:
    """Turns raw ICS text into CalendarEvent records using icalendar."""

    def parse_calendar(self, ics_content: str) -> Calendar:
        """Parse raw text into a VCALENDAR component.

        Raises:
            ParseError: empty body, malformed content, or a top-level
                component other than VCALENDAR
        """
        if ics_content is None or not ics_content.strip():
            raise ParseError("No ICS data returned.")

        try:
            calendar = Calendar.from_ical(ics_content)
        except Exception as e:
            logger.warning("Failed to parse ICS content: %s", e)
            raise ParseError(f"Invalid ICS content: {e}") from e

        if getattr(calendar, "name", None) != "VCALENDAR":
            raise ParseError(
                f"Expected a VCALENDAR component, got {getattr(calendar, 'name', None)!r}"
            )

        return calendar

    def parse(self, ics_content: str) -> list[CalendarEvent]:
        """Parse ICS text and return one CalendarEvent per top-level VEVENT.

        Nested components (VEVENTs inside other components) are ignored, as
        are recurrence rules: each VEVENT yields exactly one record.
        """
        calendar = self.parse_calendar(ics_content)

        events = [
            self._parse_event_component(component)
            for component in calendar.subcomponents
            if component.name == "VEVENT"
        ]

        logger.debug("Parsed %d events from ICS content", len(events))
        return events

    def _parse_event_component(self, component: Any) -> CalendarEvent:
        """Map a single VEVENT component to a CalendarEvent."""
        uid = str(component.get("UID", "<no uid>"))

        raw_start = _prop_value(component, "DTSTART", uid)
        if raw_start is None:
            raise ParseError(f"Event {uid} is missing DTSTART")
        start = _to_datetime(raw_start, "DTSTART", uid)

        raw_end = _prop_value(component, "DTEND", uid)
        duration = _prop_value(component, "DURATION", uid)
        if raw_end is not None:
            end = _to_datetime(raw_end, "DTEND", uid)
        elif isinstance(duration, timedelta):
            end = start + duration
        elif not isinstance(raw_start, datetime):
            # All-day event without an end covers its start day
            end = start + timedelta(days=1)
        else:
            end = start

        return CalendarEvent(
            summary=_text_or_none(component.get("SUMMARY")),
            start=start,
            end=end,
            description=_text_or_none(component.get("DESCRIPTION")),
            location=_text_or_none(component.get("LOCATION")),
        )
