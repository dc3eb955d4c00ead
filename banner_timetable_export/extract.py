"""
Named-group field extraction from loosely structured text blocks.
"""
from __future__ import annotations

import re
from typing import Dict, List, Pattern, Union

from .errors import ExtractionFailed

PatternLike = Union[str, Pattern[str]]


def _compile(pattern: PatternLike, flags: int) -> Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern, flags)
    return pattern


def _match_to_fields(match: re.Match) -> Dict[str, str]:
    """Map each named group to its capture, stripped; unmatched groups become ''."""
    return {name: (value or "").strip() for name, value in match.groupdict().items()}


def extract(pattern: PatternLike, text: str, flags: int = re.MULTILINE) -> Dict[str, str]:
    """
    Extract the named groups of ``pattern`` from ``text``.

    String patterns are compiled with ``flags`` (multi-line by default, since
    Banner blocks are delimited by line breaks); compiled patterns are used
    as-is. Raises ExtractionFailed when the pattern does not match.
    """
    regexp = _compile(pattern, flags)
    m = regexp.search(text or "")
    if not m:
        raise ExtractionFailed(f"Text does not match pattern {regexp.pattern!r}")
    return _match_to_fields(m)


def extract_all(pattern: PatternLike, text: str, flags: int = re.MULTILINE) -> List[Dict[str, str]]:
    """Extract fields from every non-overlapping match, in order of appearance."""
    regexp = _compile(pattern, flags)
    return [_match_to_fields(m) for m in regexp.finditer(text or "")]
