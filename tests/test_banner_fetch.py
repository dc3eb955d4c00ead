import pytest
import requests

from banner_timetable_export.banner_fetch import (
    DEFAULT_URI,
    PublicSchedule,
    build_course_query,
    semester_id_for,
    split_course,
)
from banner_timetable_export.errors import SourceFetchFailed

EMPTY_PAGE = "<html><body><p>No classes were found that meet your search criteria</p></body></html>"


class _Response:
    def __init__(self, text="", status=200):
        self.text = text
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class _Http:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, data=None, timeout=None):
        self.calls.append((url, data, timeout))
        if self.error:
            raise self.error
        return self.response


def test_semester_id_for():
    assert semester_id_for(2013, "fall") == "201390"
    assert semester_id_for(2014, "Spring") == "201410"
    with pytest.raises(ValueError, match="Unknown semester"):
        semester_id_for(2014, "autumn")


def test_split_course():
    assert split_course("EECE 251") == ("EECE", "251")
    assert split_course("eece  580A") == ("EECE", "580A")
    with pytest.raises(ValueError):
        split_course("EECE251")


def test_build_course_query_repeats_multiselect_keys():
    pairs = build_course_query("201390", "EECE", "251")
    assert ("term_in", "201390") in pairs
    assert [v for k, v in pairs if k == "sel_subj"] == ["dummy", "EECE"]
    assert [v for k, v in pairs if k == "sel_camp"] == ["dummy", "%"]
    assert ("sel_crse", "251") in pairs
    assert ("sel_day", "dummy") in pairs
    assert pairs[-1] == ("end_ap", "a")


class TestPublicSchedule:
    def test_posts_form_and_parses(self):
        http = _Http(_Response(EMPTY_PAGE))
        schedule = PublicSchedule(2013, "fall", http=http, timeout=5)
        assert schedule.get_course_sessions("EECE 251") == []
        url, data, timeout = http.calls[0]
        assert url == f"{DEFAULT_URI}/bwckschd.p_get_crse_unsec"
        assert ("sel_crse", "251") in data
        assert timeout == 5

    def test_custom_base_uri(self):
        http = _Http(_Response(EMPTY_PAGE))
        PublicSchedule(2014, "spring", base_uri="https://banner.example.edu/prod/", http=http) \
            .get_course_sessions("CS", "211")
        assert http.calls[0][0] == "https://banner.example.edu/prod/bwckschd.p_get_crse_unsec"

    def test_transport_error_surfaces(self):
        http = _Http(error=requests.ConnectionError("connection refused"))
        with pytest.raises(SourceFetchFailed) as exc:
            PublicSchedule(2013, http=http).get_course_sessions("EECE 251")
        assert isinstance(exc.value.__cause__, requests.ConnectionError)

    def test_http_error_surfaces(self):
        http = _Http(_Response(status=503))
        with pytest.raises(SourceFetchFailed):
            PublicSchedule(2013, http=http).get_course_sessions("EECE 251")
