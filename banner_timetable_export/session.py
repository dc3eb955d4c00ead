"""
The CourseSession record: one meeting pattern of one course section.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Tuple

from .errors import MalformedValue

# Banner weekday codes, Sunday first: U=Sunday, R=Thursday.
WEEKDAY_CODES = "UMTWRFS"

DateRange = Tuple[date, date]


def normalize_days(text: str | None) -> str:
    """
    Validate a Banner day pattern such as 'MWF' or 'TR'.

    Whitespace (including the &nbsp; Banner prints for non-meeting rows) is
    dropped; any other symbol outside WEEKDAY_CODES raises MalformedValue.
    """
    days = "".join((text or "").split()).upper()
    unknown = [c for c in days if c not in WEEKDAY_CODES]
    if unknown:
        raise MalformedValue(f"Unknown weekday code(s) {''.join(unknown)!r} in {text!r}")
    return days


@dataclass(frozen=True)
class CourseSession:
    number: str
    crn: Optional[int] = None
    section: str = ""
    name: str = ""
    description: str = ""
    term: str = ""
    credit_count: float = 0.0
    days: str = ""
    room: Optional[str] = None
    type: str = ""
    instructor: str = ""
    start_time: Optional[timedelta] = None
    end_time: Optional[timedelta] = None
    date_range: Optional[DateRange] = None
    registration_window: Optional[DateRange] = None
    count: int = 1

    def __post_init__(self) -> None:
        if not self.number:
            raise MalformedValue("Course number must not be empty")
        if self.crn is not None and self.crn <= 0:
            raise MalformedValue(f"CRN must be positive, got {self.crn}")
        if self.credit_count < 0:
            raise MalformedValue(f"Credit count must not be negative, got {self.credit_count}")
        if self.count < 1:
            raise MalformedValue(f"Count must be at least 1, got {self.count}")
        if any(c not in WEEKDAY_CODES for c in self.days):
            raise MalformedValue(f"Unknown weekday code in {self.days!r}")
        if (
            self.start_time is not None
            and self.end_time is not None
            and self.start_time > self.end_time
        ):
            raise MalformedValue("start_time must not be after end_time")
        for label, pair in (("date_range", self.date_range), ("registration_window", self.registration_window)):
            if pair is not None and pair[0] > pair[1]:
                raise MalformedValue(f"{label} ends before it starts: {pair}")

    @property
    def schedulable(self) -> bool:
        """Sessions without times or dates cannot be placed on a calendar."""
        return (
            self.start_time is not None
            and self.end_time is not None
            and self.date_range is not None
        )
