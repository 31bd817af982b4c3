"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol


class EvaluationObserver(Protocol):
    """Observer port emitting structured events during an evaluation run.

    Implementations may log to structlog, record for tests, or render progress.
    """

    def evaluation_started(
        self,
        run_id: str,
        total_samples: int,
        model_names: list[str],
        num_epochs: int,
        accepted_tool_names: list[str],
    ) -> None: ...

    def evaluation_completed(
        self, run_id: str, total_rows: int, elapsed_seconds: float
    ) -> None: ...

    def model_started(self, run_id: str, model: str) -> None: ...

    def model_completed(
        self, run_id: str, model: str, elapsed_seconds: float
    ) -> None: ...

    def model_failed(self, run_id: str, model: str, reason: str) -> None: ...

    def sample_solve_started(self, model: str, sample_id: str, epoch: int) -> None: ...

    def sample_solve_completed(
        self, model: str, sample_id: str, epoch: int, num_tool_calls: int
    ) -> None: ...

    def sample_solve_failed(
        self, model: str, sample_id: str, epoch: int, reason: str
    ) -> None: ...

    def scoring_started(
        self, model: str, epoch: int, eligible: int, total: int
    ) -> None: ...

    def judge_request_failed(
        self,
        model: str,
        sample_id: str,
        epoch: int,
        attempt: int,
        reason: str,
        will_retry: bool,
    ) -> None: ...

    def scoring_completed(
        self, model: str, epoch: int, grade_counts: dict[str, int]
    ) -> None: ...
