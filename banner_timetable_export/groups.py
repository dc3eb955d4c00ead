"""
Per-cohort calendars: route each course into one of several named calendars.

A groups file lists one calendar per line, with the courses it collects:

    # Common core
    ece_sophomore: CS 212, ISE 261, EECE 260
    ece_senior: EECE 488
    coe_senior:

Courses not listed anywhere land in the 'other' calendar.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from .calendar_builder import CalendarBuilder
from .session import CourseSession

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "other"


def normalize_course(course: str) -> str:
    """'eece  251' -> 'EECE 251'."""
    return " ".join(course.split()).upper()


def parse_groups(text: str) -> Dict[str, List[str]]:
    """
    Parse 'name: COURSE, COURSE' lines into an ordered {name: [course, ...]}.

    Blank lines and lines starting with # are ignored. Raises ValueError on a
    line without a colon, an empty group name or a repeated group name.
    """
    groups: Dict[str, List[str]] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        name, sep, rest = line.partition(":")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"line {lineno}: expected 'name: COURSE, COURSE', got {line!r}")
        if name in groups:
            raise ValueError(f"line {lineno}: group {name!r} listed twice")
        groups[name] = [normalize_course(c) for c in rest.split(",") if c.strip()]
    return groups


def load_groups(path: str | Path) -> Dict[str, List[str]]:
    return parse_groups(Path(path).read_text(encoding="utf-8"))


def group_for_course(groups: Dict[str, List[str]], course: str, default: str = DEFAULT_GROUP) -> str:
    """Name of the first group listing ``course``, else ``default``."""
    course = normalize_course(course)
    for name, courses in groups.items():
        if course in courses:
            return name
    return default


def grouped_courses(groups: Dict[str, List[str]]) -> List[str]:
    """Every listed course once, in file order."""
    seen: Dict[str, None] = {}
    for courses in groups.values():
        for course in courses:
            seen.setdefault(course, None)
    return list(seen)


class GroupedCalendars:
    """
    One CalendarBuilder per group, plus the default group. Sessions are
    routed by their course number; the builders share the accept range and
    unique setting.
    """

    def __init__(self, groups: Dict[str, List[str]], accept_range=None, unique: bool = True) -> None:
        self.groups = groups
        self.unique = unique
        names = list(groups)
        if DEFAULT_GROUP not in names:
            names.append(DEFAULT_GROUP)
        self.builders: Dict[str, CalendarBuilder] = {
            name: CalendarBuilder(accept_range=accept_range, unique=unique) for name in names
        }

    def builder_for(self, session: CourseSession) -> CalendarBuilder:
        return self.builders[group_for_course(self.groups, session.number)]

    def add_session(self, session: CourseSession) -> None:
        self.builder_for(session).add_session(session)

    def add_sessions(self, sessions: Iterable[CourseSession]) -> None:
        """Route a batch; each group's share is merged as one batch in unique mode."""
        batches: Dict[str, List[CourseSession]] = {}
        for session in sessions:
            batches.setdefault(group_for_course(self.groups, session.number), []).append(session)
        for name, batch in batches.items():
            logger.debug("Routing %d session(s) to %s", len(batch), name)
            self.builders[name].add_sessions(batch)

    @property
    def sessions(self) -> List[CourseSession]:
        return [s for builder in self.builders.values() for s in builder.sessions]

    def output_names(self) -> List[str]:
        """Declared groups always; the default group only when it collected something."""
        return [
            name
            for name, builder in self.builders.items()
            if name in self.groups or builder.sessions
        ]
