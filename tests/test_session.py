import pytest
from datetime import date, timedelta

from banner_timetable_export.errors import MalformedValue
from banner_timetable_export.session import CourseSession, normalize_days


class TestNormalizeDays:
    def test_valid(self):
        assert normalize_days("MWF") == "MWF"
        assert normalize_days("tr") == "TR"

    def test_blank(self):
        assert normalize_days("\xa0") == ""
        assert normalize_days(None) == ""

    def test_strips_inner_spaces(self):
        assert normalize_days("M W F") == "MWF"

    def test_unknown_code(self):
        with pytest.raises(MalformedValue):
            normalize_days("MXF")


class TestCourseSession:
    def test_defaults(self):
        s = CourseSession(number="EECE 251")
        assert s.count == 1
        assert s.crn is None
        assert s.days == ""
        assert not s.schedulable

    def test_schedulable(self):
        s = CourseSession(
            number="EECE 251",
            start_time=timedelta(hours=10),
            end_time=timedelta(hours=11),
            date_range=(date(2013, 8, 26), date(2013, 12, 13)),
        )
        assert s.schedulable

    @pytest.mark.parametrize("kwargs", [
        {"number": ""},
        {"number": "EECE 251", "crn": 0},
        {"number": "EECE 251", "credit_count": -1.0},
        {"number": "EECE 251", "count": 0},
        {"number": "EECE 251", "days": "MXF"},
        {"number": "EECE 251", "start_time": timedelta(hours=11), "end_time": timedelta(hours=10)},
        {"number": "EECE 251", "date_range": (date(2013, 12, 13), date(2013, 8, 26))},
    ])
    def test_invariants(self, kwargs):
        with pytest.raises(MalformedValue):
            CourseSession(**kwargs)

    def test_frozen(self):
        s = CourseSession(number="EECE 251")
        with pytest.raises(AttributeError):
            s.count = 2
