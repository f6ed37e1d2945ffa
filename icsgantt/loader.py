"""Calendar loading: fetch, parse and apply the day offset."""

import logging
from collections.abc import Sequence
from datetime import timedelta
from typing import Optional

from .fetcher import ICSFetcher
from .models import CalendarEvent, DayOffset
from .parser import ICSParser

logger = logging.getLogger(__name__)


def apply_offset(events: Sequence[CalendarEvent], offset: DayOffset) -> list[CalendarEvent]:
    """Return copies of ``events`` with the uniform day offset applied.

    ``offset.start`` days are subtracted from every start and ``offset.end``
    days added to every end, both as multiples of 24 hours. This compensates
    a systematic bias in the upstream calendar boundaries; it is not a
    timezone correction.
    """
    start_delta = timedelta(hours=offset.start * 24)
    end_delta = timedelta(hours=offset.end * 24)
    return [
        event.model_copy(update={"start": event.start - start_delta, "end": event.end + end_delta})
        for event in events
    ]


class CalendarLoader:
    """Loads a calendar URL into a list of offset-adjusted CalendarEvents."""

    def __init__(self, fetcher: ICSFetcher, parser: Optional[ICSParser] = None) -> None:
        self.fetcher = fetcher
        self.parser = parser or ICSParser()

    async def load(self, url: str, offset: Optional[DayOffset] = None) -> list[CalendarEvent]:
        """Fetch ``url``, parse its VEVENTs and apply ``offset``.

        Args:
            url: ICS calendar URL
            offset: Day offset; defaults to start=5, end=0

        Returns:
            Events in document order

        Raises:
            FetchError: the resource could not be retrieved
            ParseError: the body is not a usable calendar
        """
        offset = offset or DayOffset()

        ics_content = await self.fetcher.fetch_text(url)
        events = self.parser.parse(ics_content)

        logger.info(
            "Loaded %d events from %s (offset start=%d end=%d)",
            len(events),
            url,
            offset.start,
            offset.end,
        )
        return apply_offset(events, offset)
