"""Judge configuration model."""

from pydantic import BaseModel, Field, field_validator

from tool_eval.config.domain.execution import RetryConfig
from tool_eval.judge.domain.grade import check_grade_levels


class JudgeConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    temperature: float = Field(default=0.0, ge=0.0)
    # Ordered worst -> best.
    grade_levels: list[str] = Field(default_factory=lambda: ["I", "C"], min_length=2)
    instructions: str | None = None
    max_concurrent: int = Field(default=8, ge=1)
    timeout_seconds: float = Field(default=120.0, gt=0.0)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("grade_levels")
    @classmethod
    def levels_are_valid(cls, levels: list[str]) -> list[str]:
        check_grade_levels(levels)
        return levels
