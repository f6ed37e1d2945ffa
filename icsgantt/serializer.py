"""ICS export of an edited task list."""

import logging
from collections.abc import Sequence
from datetime import date

from .exceptions import EmptyInputError
from .models import TimelineTask

logger = logging.getLogger(__name__)

PRODID = "-//icsgantt//Timeline Export//EN"
CRLF = "\r\n"

EXPORT_FILENAME = "updated.ics"
EXPORT_CONTENT_TYPE = "text/calendar; charset=utf-8"


def format_ics_date(value: date) -> str:
    """Render a calendar date as an all-day ICS value (YYYYMMDD)."""
    return value.isoformat().replace("-", "")


def serialize(tasks: Sequence[TimelineTask], origin_host: str) -> str:
    """Serialize tasks to an ICS document.

    Each task becomes one VEVENT with UID ``<id>@<origin_host>``, its name as
    SUMMARY and all-day DTSTART/DTEND values. Every line ends with CRLF.

    Text values are written as-is: commas, semicolons and newlines in task
    names are not escaped.

    Raises:
        EmptyInputError: ``tasks`` is empty
    """
    if not tasks:
        raise EmptyInputError("No tasks to export")

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
    ]
    for task in tasks:
        lines += [
            "BEGIN:VEVENT",
            f"UID:{task.id}@{origin_host}",
            f"SUMMARY:{task.name}",
            f"DTSTART;VALUE=DATE:{format_ics_date(task.start)}",
            f"DTEND;VALUE=DATE:{format_ics_date(task.end)}",
            "END:VEVENT",
        ]
    lines.append("END:VCALENDAR")

    logger.debug("Serialized %d tasks for %s", len(tasks), origin_host)
    return CRLF.join(lines) + CRLF
