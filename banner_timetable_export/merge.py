"""
Collapse sections that meet at the same time into a single session.

Two sessions are "similar" when they share start/end time, schedule type,
course number and days. Room and instructor are not part of the key, so
parallel sections taught in different rooms merge too.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from .session import CourseSession

MULTIPLE_INSTRUCTORS = "Multiple"


def similarity_key(session: CourseSession) -> str:
    """Canonical text form of (start_time, end_time, type, number, days)."""
    parts = (session.start_time, session.end_time, session.type, session.number, session.days)
    return "|".join("" if p is None else str(p) for p in parts)


def merge(sessions: Iterable[CourseSession]) -> List[CourseSession]:
    """
    Group sessions by similarity key and return one representative per group.

    The representative is the first member seen, with ``count`` set to the
    total of the members' counts and ``instructor`` set to "Multiple" when
    members disagree. Groups come out in first-seen order; inputs are not
    modified.
    """
    groups: Dict[str, List[CourseSession]] = {}
    for session in sessions:
        groups.setdefault(similarity_key(session), []).append(session)

    merged: List[CourseSession] = []
    for members in groups.values():
        first = members[0]
        instructors = {m.instructor for m in members}
        merged.append(
            replace(
                first,
                count=sum(m.count for m in members),
                instructor=first.instructor if len(instructors) == 1 else MULTIPLE_INSTRUCTORS,
            )
        )
    return merged
