"""EpochRun, ModelRun, and RunSummary — the aggregate result of an evaluation run."""

from pydantic import BaseModel, Field

from tool_eval.evaluation.domain.result import GradeResult, ResultRow
from tool_eval.evaluation.domain.solve import SolveResult


class EpochRun(BaseModel, frozen=True):
    """Solves and grades for one pass over the dataset, aligned by index."""

    epoch: int = Field(ge=0)
    solves: list[SolveResult]
    grades: list[GradeResult]


class ModelRun(BaseModel, frozen=True):
    """Pipeline state for one model.

    error is set when model-failure isolation captured a failure; epochs then
    holds only the epochs that finished before it.
    """

    model: str
    epochs: list[EpochRun] = Field(default_factory=list)
    error: str | None = None


class RunSummary(BaseModel, frozen=True):
    """Immutable summary returned when an evaluation run completes.

    rows are sorted by (model, id, epoch).
    """

    run_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    dataset_sha256: str = Field(min_length=1)
    grade_levels: list[str]
    accepted_tool_names: list[str]
    rows: list[ResultRow]
    models: dict[str, ModelRun]
