"""
Fetch section listings from a Banner "public schedule of classes".

Banner's course search is a plain form POST; no login is needed. The
endpoint insists on every selection field being present, with 'dummy'
placeholders for the multi-select ones.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import requests

from .banner_html import parse_banner_html
from .errors import SourceFetchFailed
from .session import CourseSession

logger = logging.getLogger(__name__)

DEFAULT_URI = "https://ssb.cc.binghamton.edu/banner"
GET_COURSE_SESSIONS_PATH = "bwckschd.p_get_crse_unsec"
DEFAULT_TIMEOUT = 30

SEMESTER_CODE = {
    "fall": 90,
    "summer": 60,
    "winter": 20,
    "spring": 10,
}

# Banner's representation of "no selection" for a multi-select field.
EMPTY_FIELD = ("dummy", "%")

COURSE_SELECTION_TEMPLATE: Sequence[Tuple[str, object]] = (
    ("term_in", "0"),
    ("sel_subj", EMPTY_FIELD),
    ("sel_day", "dummy"),
    ("sel_schd", EMPTY_FIELD),
    ("sel_insm", EMPTY_FIELD),
    ("sel_camp", EMPTY_FIELD),
    ("sel_levl", EMPTY_FIELD),
    ("sel_sess", EMPTY_FIELD),
    ("sel_instr", EMPTY_FIELD),
    ("sel_ptrm", EMPTY_FIELD),
    ("sel_attr", EMPTY_FIELD),
    ("sel_crse", ""),
    ("sel_title", ""),
    ("sel_from_cred", ""),
    ("sel_to_cred", ""),
    ("begin_hh", "0"),
    ("begin_mi", "0"),
    ("begin_ap", "a"),
    ("end_hh", "0"),
    ("end_mi", "0"),
    ("end_ap", "a"),
)


def semester_id_for(year: int, semester: str) -> str:
    """Banner term id, e.g. (2013, 'fall') -> '201390'."""
    try:
        code = SEMESTER_CODE[semester.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown semester {semester!r}. Use one of: {', '.join(SEMESTER_CODE)}."
        ) from None
    return f"{year}{code}"


def split_course(course: str) -> Tuple[str, str]:
    """Split 'EECE 251' into ('EECE', '251')."""
    parts = course.split()
    if len(parts) != 2:
        raise ValueError(f"Expected '<SUBJECT> <NUMBER>', e.g. 'EECE 251', got {course!r}")
    return parts[0].upper(), parts[1]


def build_course_query(term_id: str, subject_code: str, class_number: str) -> List[Tuple[str, str]]:
    """
    Flatten the selection template into form pairs. Repeated keys are kept
    as separate pairs (sel_subj=dummy&sel_subj=EECE), which is what Banner
    expects.
    """
    overrides = {
        "term_in": term_id,
        "sel_subj": ("dummy", subject_code),
        "sel_crse": class_number,
    }
    pairs: List[Tuple[str, str]] = []
    for key, default in COURSE_SELECTION_TEMPLATE:
        value = overrides.get(key, default)
        if isinstance(value, tuple):
            pairs.extend((key, v) for v in value)
        else:
            pairs.append((key, str(value)))
    return pairs


class PublicSchedule:
    """Connection to one term of a Banner public schedule."""

    def __init__(
        self,
        year: int,
        semester: str = "fall",
        base_uri: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http: requests.Session | None = None,
    ) -> None:
        self.term_id = semester_id_for(year, semester)
        self.base_uri = (base_uri or DEFAULT_URI).rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def fetch_course_html(self, subject_code: str, class_number: str) -> str:
        """POST the course search form and return the raw result page."""
        url = f"{self.base_uri}/{GET_COURSE_SESSIONS_PATH}"
        data = build_course_query(self.term_id, subject_code, class_number)
        logger.info("Fetching %s %s for term %s", subject_code, class_number, self.term_id)
        try:
            resp = self.http.post(url, data=data, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise SourceFetchFailed(
                f"Could not fetch {subject_code} {class_number} from {url}: {e}"
            ) from e
        return resp.text

    def get_course_sessions(self, subject_code: str, class_number: str | None = None) -> List[CourseSession]:
        """
        Return every session of a course. Accepts either ('EECE', '251') or
        a single 'EECE 251' string.
        """
        if class_number is None:
            subject_code, class_number = split_course(subject_code)
        html = self.fetch_course_html(subject_code, class_number)
        return parse_banner_html(html_content=html)
