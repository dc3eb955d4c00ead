from collections import Counter
from datetime import date, timedelta

from banner_timetable_export.merge import MULTIPLE_INSTRUCTORS, merge, similarity_key
from banner_timetable_export.session import CourseSession


def _session(instructor="A", **overrides):
    fields = dict(
        number="EECE 251",
        type="Lecture",
        days="MWF",
        start_time=timedelta(hours=10, minutes=50),
        end_time=timedelta(hours=11, minutes=50),
        date_range=(date(2013, 8, 26), date(2013, 12, 13)),
        instructor=instructor,
    )
    fields.update(overrides)
    return CourseSession(**fields)


def test_similarity_key_ignores_room_and_instructor():
    a = _session(instructor="A", room="UU 209", section="A 0", crn=1)
    b = _session(instructor="B", room="LH 6", section="A 1", crn=2)
    assert similarity_key(a) == similarity_key(b)


def test_similarity_key_distinguishes_time_type_number_days():
    base = similarity_key(_session())
    assert similarity_key(_session(start_time=timedelta(hours=9, minutes=50))) != base
    assert similarity_key(_session(end_time=timedelta(hours=12))) != base
    assert similarity_key(_session(type="Lab")) != base
    assert similarity_key(_session(number="EECE 252")) != base
    assert similarity_key(_session(days="TR")) != base


def test_merge_three_sections():
    merged = merge([_session("A"), _session("B"), _session("A")])
    assert len(merged) == 1
    assert merged[0].count == 3
    assert merged[0].instructor == MULTIPLE_INSTRUCTORS


def test_merge_agreeing_instructors_kept():
    merged = merge([_session("A"), _session("A")])
    assert merged[0].instructor == "A"
    assert merged[0].count == 2


def test_merge_keeps_first_seen_order_and_distinct_groups():
    lab = _session(type="Lab", days="R")
    merged = merge([_session(), lab, _session()])
    assert [s.type for s in merged] == ["Lecture", "Lab"]
    assert [s.count for s in merged] == [2, 1]


def test_merge_does_not_modify_inputs():
    originals = [_session("A"), _session("B")]
    merge(originals)
    assert [s.count for s in originals] == [1, 1]
    assert [s.instructor for s in originals] == ["A", "B"]


def test_merge_is_idempotent():
    xs = [_session("A"), _session("B"), _session(type="Lab"), _session("C", days="TR")]
    once = merge(xs)
    assert Counter(merge(once)) == Counter(once)


def test_merge_empty():
    assert merge([]) == []
