"""GradeScale and Grade — an explicit ordered grading scale."""

import functools

from pydantic import BaseModel, Field, model_validator


@functools.total_ordering
class Grade(BaseModel, frozen=True):
    """One level of a GradeScale. Ordered by rank, never by the level's spelling."""

    level: str
    rank: int = Field(ge=0)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Grade):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self) -> str:
        return self.level


def check_grade_levels(levels: list[str]) -> None:
    """Raise ValueError unless levels are non-blank and distinct ignoring case."""
    if any(not level.strip() for level in levels):
        raise ValueError("grade levels must be non-empty")
    folded = [level.casefold() for level in levels]
    if len(set(folded)) != len(folded):
        raise ValueError(f"grade levels must be distinct (case-insensitive): {levels}")


class GradeScale(BaseModel, frozen=True):
    """Grade levels ordered worst to best, e.g. ["I", "C"] or ["I", "P", "C"]."""

    levels: list[str] = Field(min_length=2)

    @model_validator(mode="after")
    def levels_are_valid(self) -> "GradeScale":
        check_grade_levels(self.levels)
        return self

    @property
    def worst(self) -> Grade:
        return Grade(level=self.levels[0], rank=0)

    @property
    def best(self) -> Grade:
        return Grade(level=self.levels[-1], rank=len(self.levels) - 1)

    def grade(self, level: str) -> Grade:
        """
        Return the Grade for level, matched case-insensitively.

        Raises:
            ValueError: if level is not on this scale.
        """
        folded = level.casefold()
        for rank, candidate in enumerate(self.levels):
            if candidate.casefold() == folded:
                return Grade(level=candidate, rank=rank)
        raise ValueError(f"'{level}' is not one of {self.levels}")
