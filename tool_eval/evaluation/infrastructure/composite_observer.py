"""CompositeEvaluationObserver — fans out all events to a list of observers."""

from tool_eval.evaluation.domain.observer import EvaluationObserver


class CompositeEvaluationObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[EvaluationObserver]) -> None:
        self._observers = observers

    def evaluation_started(
        self,
        run_id: str,
        total_samples: int,
        model_names: list[str],
        num_epochs: int,
        accepted_tool_names: list[str],
    ) -> None:
        for obs in self._observers:
            obs.evaluation_started(
                run_id=run_id,
                total_samples=total_samples,
                model_names=model_names,
                num_epochs=num_epochs,
                accepted_tool_names=accepted_tool_names,
            )

    def evaluation_completed(
        self, run_id: str, total_rows: int, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.evaluation_completed(
                run_id=run_id, total_rows=total_rows, elapsed_seconds=elapsed_seconds
            )

    def model_started(self, run_id: str, model: str) -> None:
        for obs in self._observers:
            obs.model_started(run_id=run_id, model=model)

    def model_completed(self, run_id: str, model: str, elapsed_seconds: float) -> None:
        for obs in self._observers:
            obs.model_completed(
                run_id=run_id, model=model, elapsed_seconds=elapsed_seconds
            )

    def model_failed(self, run_id: str, model: str, reason: str) -> None:
        for obs in self._observers:
            obs.model_failed(run_id=run_id, model=model, reason=reason)

    def sample_solve_started(self, model: str, sample_id: str, epoch: int) -> None:
        for obs in self._observers:
            obs.sample_solve_started(model=model, sample_id=sample_id, epoch=epoch)

    def sample_solve_completed(
        self, model: str, sample_id: str, epoch: int, num_tool_calls: int
    ) -> None:
        for obs in self._observers:
            obs.sample_solve_completed(
                model=model,
                sample_id=sample_id,
                epoch=epoch,
                num_tool_calls=num_tool_calls,
            )

    def sample_solve_failed(
        self, model: str, sample_id: str, epoch: int, reason: str
    ) -> None:
        for obs in self._observers:
            obs.sample_solve_failed(
                model=model, sample_id=sample_id, epoch=epoch, reason=reason
            )

    def scoring_started(self, model: str, epoch: int, eligible: int, total: int) -> None:
        for obs in self._observers:
            obs.scoring_started(model=model, epoch=epoch, eligible=eligible, total=total)

    def judge_request_failed(
        self,
        model: str,
        sample_id: str,
        epoch: int,
        attempt: int,
        reason: str,
        will_retry: bool,
    ) -> None:
        for obs in self._observers:
            obs.judge_request_failed(
                model=model,
                sample_id=sample_id,
                epoch=epoch,
                attempt=attempt,
                reason=reason,
                will_retry=will_retry,
            )

    def scoring_completed(
        self, model: str, epoch: int, grade_counts: dict[str, int]
    ) -> None:
        for obs in self._observers:
            obs.scoring_completed(model=model, epoch=epoch, grade_counts=grade_counts)
