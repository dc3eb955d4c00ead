"""
Error kinds raised while turning schedule text into calendar events.

Per-record problems (ExtractionFailed, MalformedRange, MalformedValue) share
the ScheduleParseError base so batch loops can discard exactly those and let
anything else propagate.
"""
from __future__ import annotations


class ScheduleParseError(ValueError):
    """A single candidate record could not be read."""


class ExtractionFailed(ScheduleParseError):
    """A text block did not match the expected pattern."""


class MalformedRange(ScheduleParseError):
    """A date/time range lacked its separator or was decreasing."""


class MalformedValue(ScheduleParseError):
    """A scalar field (time, date, number, weekday code) could not be converted."""


class SourceFetchFailed(RuntimeError):
    """The remote schedule could not be retrieved."""
