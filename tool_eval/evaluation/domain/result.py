"""GradeResult and ResultRow — per-sample scoring outcomes."""

from typing import Any

from pydantic import BaseModel, Field

from tool_eval.dataset.domain.sample import MetadataValue
from tool_eval.judge.domain.grade import Grade


class GradeResult(BaseModel, frozen=True):
    """Scorer output for one sample.

    judge_prompt and judge_response are None when no judge request was made,
    i.e. the sample was auto-failed at the tool-call gate.
    """

    score: Grade
    tool_called: bool
    judge_prompt: str | None = None
    judge_response: str | None = None
    error: str | None = None


class ResultMetadata(BaseModel, frozen=True):
    judge_prompt: str | None
    judge_response: str | None
    tool_called: bool
    error: str | None


class ResultRow(BaseModel, frozen=True):
    """One (model, sample, epoch) row of a run."""

    model: str
    id: str
    epoch: int = Field(ge=0)
    score: Grade
    metadata: ResultMetadata
    sample_type: str | None = None
    sample_metadata: dict[str, MetadataValue] = Field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        """Flat dict for JSONL output; sample metadata become extra columns."""
        record: dict[str, Any] = dict(self.sample_metadata)
        record.update(
            model=self.model,
            id=self.id,
            epoch=self.epoch,
            score=self.score.level,
            score_rank=self.score.rank,
            sample_type=self.sample_type,
            judge_prompt=self.metadata.judge_prompt,
            judge_response=self.metadata.judge_response,
            tool_called=self.metadata.tool_called,
            error=self.metadata.error,
        )
        return record
