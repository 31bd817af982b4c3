"""Aggregator — per-model grade counts and accuracy for a completed run."""

from dataclasses import dataclass

from tool_eval.evaluation.domain.summary import RunSummary


@dataclass(frozen=True)
class ModelAggregate:
    """Grade distribution for one model across all samples and epochs.

    counts is keyed by grade level in scale order, worst first, and includes
    levels no row reached. accuracy is the share of rows at the best level.
    """

    model: str
    total: int
    counts: dict[str, int]
    tool_called: int
    errors: int
    accuracy: float
    failure: str | None = None


def aggregate(summary: RunSummary) -> list[ModelAggregate]:
    """Return one ModelAggregate per model, in the order the models were run."""
    best = summary.grade_levels[-1]
    results: list[ModelAggregate] = []

    for name, model_run in summary.models.items():
        rows = [row for row in summary.rows if row.model == name]
        counts = {level: 0 for level in summary.grade_levels}
        for row in rows:
            counts[row.score.level] += 1

        total = len(rows)
        results.append(
            ModelAggregate(
                model=name,
                total=total,
                counts=counts,
                tool_called=sum(1 for row in rows if row.metadata.tool_called),
                errors=sum(1 for row in rows if row.metadata.error is not None),
                accuracy=counts[best] / total if total else 0.0,
                failure=model_run.error,
            )
        )

    return results
