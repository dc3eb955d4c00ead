import pytest
from datetime import date, datetime, timedelta

from banner_timetable_export.occurrences import expand, occurs_on, weekday_code
from banner_timetable_export.session import CourseSession


@pytest.fixture
def eece_251():
    return CourseSession(
        number="EECE 251",
        type="Lecture",
        days="MWF",
        start_time=timedelta(hours=10, minutes=50),
        end_time=timedelta(hours=11, minutes=50),
        date_range=(date(2013, 8, 26), date(2013, 12, 13)),
    )


def test_weekday_code_is_sunday_first():
    # 2013-09-15 is a Sunday
    codes = [weekday_code(date(2013, 9, 15) + timedelta(days=i)) for i in range(7)]
    assert "".join(codes) == "UMTWRFS"


class TestOccursOn:
    def test_class_day(self, eece_251):
        assert occurs_on(eece_251, date(2013, 9, 16))

    def test_non_class_day(self, eece_251):
        assert not occurs_on(eece_251, date(2013, 9, 15))

    def test_outside_range(self, eece_251):
        # Mondays, but before and after the term
        assert not occurs_on(eece_251, date(2013, 8, 19))
        assert not occurs_on(eece_251, date(2013, 12, 16))

    def test_range_bounds_inclusive(self, eece_251):
        assert occurs_on(eece_251, date(2013, 8, 26))
        assert occurs_on(eece_251, date(2013, 12, 13))

    def test_accepts_datetime(self, eece_251):
        assert occurs_on(eece_251, datetime(2013, 9, 16, 8, 0))

    def test_no_date_range(self):
        assert not occurs_on(CourseSession(number="EECE 251", days="MWF"), date(2013, 9, 16))


class TestExpand:
    def test_term_of_mwf(self, eece_251):
        dates = list(expand(eece_251))
        assert len(dates) == 16 * 3
        assert dates[0] == datetime(2013, 8, 26, 10, 50)
        assert dates[-1] == datetime(2013, 12, 13, 10, 50)
        assert all(occurs_on(eece_251, d.date()) for d in dates)

    def test_restartable(self, eece_251):
        occurrences = expand(eece_251)
        assert list(occurrences) == list(occurrences)
        assert sum(1 for _ in occurrences) == 48

    def test_no_days(self, eece_251):
        from dataclasses import replace
        assert list(expand(replace(eece_251, days=""))) == []

    def test_single_day_range(self):
        s = CourseSession(
            number="EECE 251",
            days="T",
            start_time=timedelta(hours=18),
            end_time=timedelta(hours=20),
            date_range=(date(2013, 10, 8), date(2013, 10, 8)),
        )
        assert list(expand(s)) == [datetime(2013, 10, 8, 18, 0)]

    def test_missing_start_time_reads_as_midnight(self):
        s = CourseSession(number="EECE 251", days="M", date_range=(date(2013, 9, 16), date(2013, 9, 16)))
        assert list(expand(s)) == [datetime(2013, 9, 16)]

    def test_no_date_range(self):
        assert list(expand(CourseSession(number="EECE 251", days="MWF"))) == []
