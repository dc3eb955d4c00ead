"""
Normalize textual times and dates.

Times of day become ``timedelta`` offsets from local midnight; dates become
``datetime.date``. Both Banner's "10:50 am" style and the bare "1050" digits
used in CSV exports are accepted.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Tuple

from dateutil import parser as date_parser

from .errors import MalformedRange, MalformedValue

DEFAULT_SEPARATOR = " - "

# Placeholders Banner prints for meetings that have not been scheduled yet.
UNSCHEDULED_MARKERS = {"TBA", "TBD"}

# Two defaults that differ in every date field: a date parsed against both
# comes out the same only when the text names year, month and day.
_GAP_FILLERS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

_TIME_RE = re.compile(
    r"^(?:(?P<hour>\d{1,2}):(?P<minute>\d{2})|(?P<digits>\d{1,4}))"
    r"\s*(?:(?P<meridiem>[AaPp])\.?\s*[Mm]\.?)?$"
)


def is_unscheduled(text: str | None) -> bool:
    """True for Banner's 'TBA' style placeholders."""
    return (text or "").strip().upper() in UNSCHEDULED_MARKERS


def parse_time_of_day(text: str) -> timedelta:
    """
    Parse '10:50 AM', '10:50 am', '14:30' or bare digits like '1050' / '850'
    into the elapsed time since midnight.
    """
    m = _TIME_RE.match((text or "").strip())
    if not m:
        raise MalformedValue(f"Unrecognized time of day: {text!r}")

    if m.group("digits") is not None:
        digits = m.group("digits").zfill(4)
        hour, minute = int(digits[:2]), int(digits[2:])
    else:
        hour, minute = int(m.group("hour")), int(m.group("minute"))

    meridiem = m.group("meridiem")
    if meridiem:
        if not 1 <= hour <= 12:
            raise MalformedValue(f"Hour out of range for 12-hour clock: {text!r}")
        if meridiem.upper() == "A":
            if hour == 12:
                hour = 0
        elif hour != 12:
            hour += 12
    elif hour > 23:
        raise MalformedValue(f"Hour out of range: {text!r}")

    if minute > 59:
        raise MalformedValue(f"Minute out of range: {text!r}")
    return timedelta(hours=hour, minutes=minute)


def _split_range(text: str, separator: str) -> Tuple[str, str]:
    if not text or separator not in text:
        raise MalformedRange(f"Expected {separator!r} in range: {text!r}")
    start, _, end = text.partition(separator)
    return start.strip(), end.strip()


def parse_time_range(text: str, separator: str = DEFAULT_SEPARATOR) -> Tuple[timedelta, timedelta]:
    """Parse '10:50 am - 11:50 am' into (start, end) offsets from midnight."""
    start_text, end_text = _split_range(text, separator)
    start, end = parse_time_of_day(start_text), parse_time_of_day(end_text)
    if start > end:
        raise MalformedRange(f"Time range ends before it starts: {text!r}")
    return start, end


def parse_date(text: str) -> date:
    """
    Parse a free-form calendar date, e.g. 'Aug 26, 2013' or '2013-08-26'.

    Year, month and day must all be present; dateutil would otherwise fill
    the gaps from today's date.
    """
    if not text or not text.strip():
        raise MalformedValue("Empty date")
    try:
        parsed = [date_parser.parse(text.strip(), default=d).date() for d in _GAP_FILLERS]
    except (ValueError, OverflowError) as e:
        raise MalformedValue(f"Unrecognized date: {text!r}") from e
    if parsed[0] != parsed[1]:
        raise MalformedValue(f"Incomplete date (needs year, month and day): {text!r}")
    return parsed[0]


def parse_date_range(text: str, separator: str = DEFAULT_SEPARATOR) -> Tuple[date, date]:
    """Parse 'Aug 26, 2013 - Dec 13, 2013' into an inclusive (start, end) pair."""
    start_text, end_text = _split_range(text, separator)
    start, end = parse_date(start_text), parse_date(end_text)
    if start > end:
        raise MalformedRange(f"Date range ends before it starts: {text!r}")
    return start, end
