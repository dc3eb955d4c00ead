"""
Build CourseSession records from CSV exports of a department schedule.

Expected columns: CRN, Title Short Desc, Cr, Meet, Instructor, Location,
Type, Dept, #, Begin, End. Begin/End are bare clock digits ("850", "1050").
The export carries no dates, so every row is placed in the current week.
"""
from __future__ import annotations

import csv
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from .errors import MalformedValue, ScheduleParseError
from .session import CourseSession, DateRange, normalize_days
from .times import parse_time_of_day

logger = logging.getLogger(__name__)


def current_week(today: Optional[date] = None) -> DateRange:
    """Sunday through Saturday of the week containing ``today``."""
    today = today or date.today()
    sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    return sunday, sunday + timedelta(days=6)


def _cell(row: Mapping[str, Optional[str]], column: str) -> str:
    return (row.get(column) or "").strip()


def session_from_csv_row(row: Mapping[str, Optional[str]], today: Optional[date] = None) -> CourseSession:
    """Map one CSV row onto a CourseSession; raises ScheduleParseError on bad cells."""
    crn_text = _cell(row, "CRN")
    credits_text = _cell(row, "Cr")
    try:
        crn = int(crn_text) if crn_text else None
        credit_count = float(credits_text) if credits_text else 0.0
    except ValueError as e:
        raise MalformedValue(f"Bad numeric cell in row {dict(row)!r}") from e

    begin, end = _cell(row, "Begin"), _cell(row, "End")
    start_time = parse_time_of_day(begin) if begin else None
    end_time = parse_time_of_day(end) if end else None

    number = " ".join(part for part in (_cell(row, "Dept"), _cell(row, "#")) if part)

    return CourseSession(
        crn=crn,
        number=number,
        name=_cell(row, "Title Short Desc"),
        credit_count=credit_count,
        days=normalize_days(_cell(row, "Meet")),
        room=_cell(row, "Location") or None,
        type=_cell(row, "Type"),
        instructor=_cell(row, "Instructor"),
        start_time=start_time,
        end_time=end_time,
        date_range=current_week(today),
    )


def sessions_from_csv_rows(
    rows: Iterable[Mapping[str, Optional[str]]], today: Optional[date] = None
) -> List[CourseSession]:
    """Convert every well-formed row; malformed rows are skipped."""
    sessions: List[CourseSession] = []
    for line_no, row in enumerate(rows, start=2):
        try:
            sessions.append(session_from_csv_row(row, today=today))
        except ScheduleParseError as e:
            logger.debug("Discarding CSV row %d: %s", line_no, e)
    return sessions


def read_csv_sessions(csv_path: str | Path, today: Optional[date] = None) -> List[CourseSession]:
    """Read a CSV file with a header row and convert its rows."""
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        rows: List[Dict[str, Optional[str]]] = list(csv.DictReader(f))
    return sessions_from_csv_rows(rows, today=today)
