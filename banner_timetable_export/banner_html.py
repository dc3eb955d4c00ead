"""
Parse Banner "public schedule of classes" pages into CourseSession records.

Banner lays sections out as alternating rows of one layout table:

    <tr><th class="ddtitle"><a>Digital Logic Design (LEC) - 10406 - EECE 251 - A 0</a></th></tr>
    <tr><td class="dddefault">
        description, Associated Term, Registration Dates, credits ...
        <table summary="...scheduled meeting times...">
          Type | Time | Days | Where | Date Range | Schedule Type | Instructors
          Class | 10:50 am - 11:50 am | MWF | University Union 209 | ...
        </table>
    </td></tr>

Header and body rows carry no structural marker beyond their text, so each
row is classified by whether it satisfies the header pattern. A body may
list several "Class" meeting rows; each one becomes its own session.
"""
from __future__ import annotations

import enum
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup  # type: ignore[import]

from .errors import MalformedValue, ScheduleParseError
from .extract import extract, extract_all
from .session import CourseSession, normalize_days
from .times import (
    is_unscheduled,
    parse_date_range,
    parse_time_range,
)

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────
#  Patterns
# ──────────────────────────────────────────────────────────────────

# "Digital Logic Design (LEC) - 10406 - EECE 251 - A 0"
HEADER_PATTERN = re.compile(
    r"^\s*(?P<name>\S.*?) - (?P<crn>\d+) - (?P<number>[^\n]+?) - (?P<section>[^\n-]+?)\s*$",
    re.MULTILINE,
)

BODY_PATTERN = re.compile(
    r"\A\s*(?P<description>.*?)\s*^\s*Associated Term:\s*(?P<term>[^\n]+)$"
    r".*?^\s*Registration Dates:\s*(?P<registration_window>[^\n]+)$"
    r".*?(?P<credit_count>\d+(?:\.\d+)?)\s+Credits",
    re.MULTILINE | re.DOTALL,
)

# One row of the "Scheduled Meeting Times" table, one cell per line.
# Days, room and instructor may be blank (&nbsp;); the rest may not.
MEETING_PATTERN = re.compile(
    r"\A[ \t]*Class[ \t]*\n"
    r"(?P<time_range>[^\n]*\S[^\n]*)\n"
    r"(?P<days>[^\n]*)\n"
    r"(?P<room>[^\n]*)\n"
    r"(?P<date_range>[^\n]*\S[^\n]*)\n"
    r"(?P<type>[^\n]*\S[^\n]*)"
    r"(?:\n(?P<instructor>[^\n]*))?",
)

# Each meeting row plus everything up to the next one.
MEETING_FRAGMENT_PATTERN = re.compile(
    r"(?P<fragment>^[ \t]*Class[ \t]*$.*?)(?=^[ \t]*Class[ \t]*$|\Z)",
    re.MULTILINE | re.DOTALL,
)

REGISTRATION_SEPARATOR = " to "

SECTIONS_TABLE_SUMMARY = "This layout table is used to present the sections found"


# ──────────────────────────────────────────────────────────────────
#  Field conversion
# ──────────────────────────────────────────────────────────────────

def _to_int(text: str, label: str) -> int:
    try:
        return int(text)
    except ValueError as e:
        raise MalformedValue(f"{label} is not an integer: {text!r}") from e


def _to_float(text: str, label: str) -> float:
    try:
        return float(text)
    except ValueError as e:
        raise MalformedValue(f"{label} is not a number: {text!r}") from e


def meeting_fragments(body: str) -> List[str]:
    """Split a body into the text slices that begin at each 'Class' meeting row."""
    return [fields["fragment"] for fields in extract_all(MEETING_FRAGMENT_PATTERN, body)]


def build_session(header: str, body: str, meeting: str) -> CourseSession:
    """
    Build one CourseSession from a (header, body, meeting) text triple.

    Raises a ScheduleParseError subclass when any block fails to match or a
    field cannot be converted.
    """
    fields: Dict[str, str] = {}
    fields.update(extract(HEADER_PATTERN, header))
    fields.update(extract(BODY_PATTERN, body))
    fields.update(extract(MEETING_PATTERN, meeting))

    start_time = end_time = None
    if not is_unscheduled(fields["time_range"]):
        start_time, end_time = parse_time_range(fields["time_range"])

    date_range = None
    if not is_unscheduled(fields["date_range"]):
        date_range = parse_date_range(fields["date_range"])

    return CourseSession(
        crn=_to_int(fields["crn"], "CRN"),
        number=fields["number"],
        section=fields["section"],
        name=fields["name"],
        description=fields["description"],
        term=fields["term"],
        credit_count=_to_float(fields["credit_count"], "Credit count"),
        days=normalize_days(fields["days"]),
        room=fields["room"] or None,
        type=fields["type"],
        instructor=fields["instructor"],
        start_time=start_time,
        end_time=end_time,
        date_range=date_range,
        registration_window=parse_date_range(
            fields["registration_window"], separator=REGISTRATION_SEPARATOR
        ),
    )


# ──────────────────────────────────────────────────────────────────
#  State machine
# ──────────────────────────────────────────────────────────────────

class ParserState(enum.Enum):
    AWAITING_HEADER = "awaiting_header"
    IN_BODY = "in_body"


class CourseSessionParser:
    """
    Classify a stream of text entries as headers or bodies.

    AWAITING_HEADER: entries are ignored until one matches HEADER_PATTERN.
    IN_BODY: the next entry that is not itself a header is the body; every
    meeting row in it yields a session, then the machine awaits a header again.
    """

    def __init__(self) -> None:
        self.state = ParserState.AWAITING_HEADER
        self._header: Optional[str] = None

    def feed(self, text: str) -> List[CourseSession]:
        """Consume one entry; return the sessions it completes (possibly none)."""
        if HEADER_PATTERN.search(text or ""):
            self._header = text
            self.state = ParserState.IN_BODY
            return []

        if self.state is ParserState.AWAITING_HEADER:
            logger.debug("Ignoring entry before any section header")
            return []

        header = self._header or ""
        self._header = None
        self.state = ParserState.AWAITING_HEADER

        sessions: List[CourseSession] = []
        for meeting in meeting_fragments(text):
            try:
                sessions.append(build_session(header, text, meeting))
            except ScheduleParseError as e:
                logger.debug("Discarding entry %r: %s", header.strip(), e)
        return sessions

    def parse(self, entries: Iterable[str]) -> List[CourseSession]:
        sessions: List[CourseSession] = []
        for entry in entries:
            sessions.extend(self.feed(entry))
        return sessions


# ──────────────────────────────────────────────────────────────────
#  Markup walking
# ──────────────────────────────────────────────────────────────────

def entry_texts(soup: BeautifulSoup) -> List[str]:
    """Text of each row in Banner's section layout table(s), in document order."""
    texts: List[str] = []
    for table in soup.find_all("table", class_="datadisplaytable"):
        if (table.get("summary") or "").strip() != SECTIONS_TABLE_SUMMARY:
            continue
        container = table.find("tbody", recursive=False) or table
        for tr in container.find_all("tr", recursive=False):
            texts.append(tr.get_text())
    return texts


def parse_banner_html(
    html_path: str | Path | None = None,
    html_content: str | None = None,
) -> List[CourseSession]:
    """
    Parse a Banner detailed section listing.

    :param html_path: Path to a saved page. Omit if html_content is provided.
    :param html_content: Raw HTML string (e.g. from PublicSchedule).
    :returns: Sessions for every well-formed meeting row; malformed ones are skipped.
    """
    if html_content is not None:
        html = html_content
    elif html_path is not None:
        html = Path(html_path).read_text(encoding="utf-8", errors="ignore")
    else:
        raise ValueError("Provide either html_path or html_content.")

    soup = BeautifulSoup(html, "html.parser")
    sessions = CourseSessionParser().parse(entry_texts(soup))
    logger.debug("Parsed %d session(s) from Banner markup", len(sessions))
    return sessions
