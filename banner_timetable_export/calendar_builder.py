"""
Turn CourseSessions into calendar events.

Each schedulable session with at least one kept occurrence becomes one event
whose start/end are its first occurrence and whose recurrence set lists every
kept meeting instant.
All instants are floating local time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Set, Tuple

from .errors import MalformedRange
from .merge import merge
from .occurrences import expand
from .session import CourseSession

logger = logging.getLogger(__name__)

# Wide enough to hold any plausible course date.
DEFAULT_ACCEPT_RANGE = (date(2000, 1, 1), date(3000, 1, 1))


@dataclass
class CalendarEvent:
    summary: str
    start: datetime
    end: datetime
    location: Optional[str]
    description: str
    recurrence_dates: List[datetime] = field(default_factory=list)


def _as_bounds(accept_range) -> Tuple[datetime, datetime]:
    """Normalize an inclusive (start, end) pair of dates/datetimes to datetimes."""
    start, end = accept_range
    if not isinstance(start, datetime):
        start = datetime.combine(start, time.min)
    if not isinstance(end, datetime):
        end = datetime.combine(end, time.max)
    if start > end:
        raise MalformedRange(f"Accept range ends before it starts: {accept_range!r}")
    return start, end


def event_summary(session: CourseSession) -> str:
    summary = f"{session.number} {session.type} - {session.name}"
    if session.count > 1:
        summary = f"{summary} ({session.count})"
    return summary


def event_description(session: CourseSession) -> str:
    return f"Instructor: {session.instructor}\n\nDescription: {session.description}"


class CalendarBuilder:
    """
    Collects sessions and assembles them into events on demand.

    :param sessions: Initial sessions, added as-is.
    :param accept_range: Inclusive (start, end) dates or datetimes; occurrences
        outside it are dropped. Defaults to DEFAULT_ACCEPT_RANGE.
    :param unique: Merge similar sections when adding batches, and drop
        occurrences whose (instant, number, type) an earlier session already
        produced.
    """

    def __init__(
        self,
        sessions: Iterable[CourseSession] = (),
        accept_range=None,
        unique: bool = True,
    ) -> None:
        self.sessions: List[CourseSession] = list(sessions)
        self.accept_range = _as_bounds(accept_range or DEFAULT_ACCEPT_RANGE)
        self.unique = unique

    def add_session(self, session: CourseSession) -> None:
        self.sessions.append(session)

    def add_sessions(self, sessions: Iterable[CourseSession]) -> None:
        """Add a batch of sessions, merging similar sections first in unique mode."""
        sessions = list(sessions)
        if self.unique:
            sessions = merge(sessions)
        self.sessions.extend(sessions)

    def accepts(self, instant: datetime) -> bool:
        start, end = self.accept_range
        return start <= instant <= end

    def build(self) -> List[CalendarEvent]:
        """Assemble events from the current sessions. Safe to call repeatedly."""
        events: List[CalendarEvent] = []
        seen: Set[Tuple[datetime, str, str]] = set()

        for session in self.sessions:
            if not session.schedulable:
                logger.debug("Skipping %s %s: no meeting time or dates", session.number, session.type)
                continue

            recurrence: List[datetime] = []
            for instant in expand(session):
                key = (instant, session.number, session.type)
                if self.unique and key in seen:
                    continue
                if not self.accepts(instant):
                    continue
                seen.add(key)
                recurrence.append(instant)

            if not recurrence:
                logger.debug("Dropping %s %s: no occurrences left", session.number, session.type)
                continue

            first = recurrence[0]
            events.append(
                CalendarEvent(
                    summary=event_summary(session),
                    start=first,
                    end=datetime.combine(first.date(), time()) + session.end_time,
                    location=session.room or None,
                    description=event_description(session),
                    recurrence_dates=recurrence,
                )
            )
        return events
