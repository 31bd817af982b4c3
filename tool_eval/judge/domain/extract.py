"""Grade extraction from free-text judge responses."""

import re

from tool_eval.judge.domain.errors import GradeParseError
from tool_eval.judge.domain.grade import Grade, GradeScale


def _pattern(scale: GradeScale) -> re.Pattern[str]:
    # Longest first so "CP" is not read as "C".
    alternatives = "|".join(
        re.escape(level) for level in sorted(scale.levels, key=len, reverse=True)
    )
    return re.compile(rf"GRADE\s*:\s*({alternatives})", re.IGNORECASE)


def extract_grade(text: str, scale: GradeScale) -> str | None:
    """
    Return the level named by the first ``GRADE: <level>`` token in text.

    Matching is case-insensitive and ignores anything after the level,
    later GRADE tokens included. The configured spelling is returned. None
    when no token is found.

    >>> extract_grade("Reasoning... Grade: i trailing text", GradeScale(levels=["I", "C"]))
    'I'
    """
    match = _pattern(scale).search(text)
    if match is None:
        return None
    return scale.grade(match.group(1)).level


def parse_grade(text: str, scale: GradeScale) -> Grade:
    """
    Like extract_grade, but returns the ranked Grade.

    Raises:
        GradeParseError: if text has no GRADE token for this scale.
    """
    level = extract_grade(text=text, scale=scale)
    if level is None:
        raise GradeParseError(levels=scale.levels)
    return scale.grade(level)
