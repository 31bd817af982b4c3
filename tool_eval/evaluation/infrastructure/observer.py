"""StructlogEvaluationObserver — production observer that delegates to structlog."""

import structlog


class StructlogEvaluationObserver:
    """Logs evaluation domain events to structlog.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def evaluation_started(
        self,
        run_id: str,
        total_samples: int,
        model_names: list[str],
        num_epochs: int,
        accepted_tool_names: list[str],
    ) -> None:
        self._log.info(
            "evaluation.started",
            run_id=run_id,
            total_samples=total_samples,
            model_names=model_names,
            num_epochs=num_epochs,
            accepted_tool_names=accepted_tool_names,
        )

    def evaluation_completed(
        self, run_id: str, total_rows: int, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "evaluation.completed",
            run_id=run_id,
            total_rows=total_rows,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def model_started(self, run_id: str, model: str) -> None:
        self._log.info("evaluation.model_started", run_id=run_id, model=model)

    def model_completed(self, run_id: str, model: str, elapsed_seconds: float) -> None:
        self._log.info(
            "evaluation.model_completed",
            run_id=run_id,
            model=model,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def model_failed(self, run_id: str, model: str, reason: str) -> None:
        self._log.error(
            "evaluation.model_failed", run_id=run_id, model=model, reason=reason
        )

    def sample_solve_started(self, model: str, sample_id: str, epoch: int) -> None:
        self._log.debug(
            "evaluation.sample_solve_started",
            model=model,
            sample_id=sample_id,
            epoch=epoch,
        )

    def sample_solve_completed(
        self, model: str, sample_id: str, epoch: int, num_tool_calls: int
    ) -> None:
        self._log.info(
            "evaluation.sample_solved",
            model=model,
            sample_id=sample_id,
            epoch=epoch,
            num_tool_calls=num_tool_calls,
        )

    def sample_solve_failed(
        self, model: str, sample_id: str, epoch: int, reason: str
    ) -> None:
        self._log.error(
            "evaluation.sample_solve_failed",
            model=model,
            sample_id=sample_id,
            epoch=epoch,
            reason=reason,
        )

    def scoring_started(self, model: str, epoch: int, eligible: int, total: int) -> None:
        self._log.info(
            "evaluation.scoring_started",
            model=model,
            epoch=epoch,
            eligible=eligible,
            total=total,
        )

    def judge_request_failed(
        self,
        model: str,
        sample_id: str,
        epoch: int,
        attempt: int,
        reason: str,
        will_retry: bool,
    ) -> None:
        log = self._log.warning if will_retry else self._log.error
        log(
            "evaluation.judge_request_failed",
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
        self._log.info(
            "evaluation.scoring_completed",
            model=model,
            epoch=epoch,
            grade_counts=grade_counts,
        )
