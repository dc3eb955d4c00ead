"""
Expand a session's date range and weekday pattern into meeting instants.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator

from .session import WEEKDAY_CODES, CourseSession


def weekday_code(day: date) -> str:
    """Banner weekday code for ``day`` (date.weekday() counts from Monday)."""
    return WEEKDAY_CODES[(day.weekday() + 1) % 7]


def occurs_on(session: CourseSession, day: date) -> bool:
    """True if the session meets on ``day``."""
    if session.date_range is None:
        return False
    if isinstance(day, datetime):
        day = day.date()
    first, last = session.date_range
    return first <= day <= last and weekday_code(day) in session.days


class SessionOccurrences:
    """
    Lazy, restartable sequence of a session's meeting instants.

    Every call to iter() walks the date range again from the start, so the
    same object can be counted and then materialized.
    """

    def __init__(self, session: CourseSession) -> None:
        self.session = session

    def __iter__(self) -> Iterator[datetime]:
        session = self.session
        if session.date_range is None:
            return
        offset = session.start_time or timedelta(0)
        day, last = session.date_range
        while day <= last:
            if occurs_on(session, day):
                yield datetime.combine(day, time()) + offset
            day += timedelta(days=1)

    def __repr__(self) -> str:
        return f"SessionOccurrences({self.session.number!r}, {self.session.date_range!r})"


def expand(session: CourseSession) -> SessionOccurrences:
    return SessionOccurrences(session)
