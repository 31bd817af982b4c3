"""ProgressEvaluationObserver — renders one Rich progress bar per model to stderr."""

import sys

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

_MODEL_COLORS: list[str] = [
    "cyan",
    "green",
    "yellow",
    "magenta",
    "blue",
]


class ProgressEvaluationObserver:
    """Advances a model's bar each time one of its samples finishes solving.

    Each bar totals samples x epochs. Labels are coloured when stderr is a TTY.
    Only evaluation, model and solve events produce output; the rest are no-ops.

    Pass ``disabled=True`` to track counts without terminal output (useful in tests).

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._done: dict[str, int] = {}
        self._total: dict[str, int] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._progress: Progress | None = None

    @property
    def done(self) -> dict[str, int]:
        return dict(self._done)

    @property
    def total(self) -> dict[str, int]:
        return dict(self._total)

    def _make_desc(self, name: str, index: int, pad_width: int) -> str:
        if sys.stderr.isatty():
            color = _MODEL_COLORS[index % len(_MODEL_COLORS)]
            return f"[{color}]{name:<{pad_width}}[/{color}]"
        return f"{name:<{pad_width}}"

    def _advance(self, model: str) -> None:
        if model not in self._done:
            return
        self._done[model] += 1
        if self._progress is not None and model in self._task_ids:
            self._progress.update(self._task_ids[model], completed=self._done[model])

    def evaluation_started(
        self,
        run_id: str,
        total_samples: int,
        model_names: list[str],
        num_epochs: int,
        accepted_tool_names: list[str],
    ) -> None:
        self._done = {name: 0 for name in model_names}
        self._total = {name: total_samples * num_epochs for name in model_names}
        self._task_ids = {}
        self._progress = None

        if self._disabled:
            return

        pad_width = max((len(name) for name in model_names), default=0)
        self._progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            TextColumn("eta"),
            TimeRemainingColumn(),
            console=Console(stderr=True),
            refresh_per_second=10,
            transient=False,
        )
        for i, name in enumerate(model_names):
            self._task_ids[name] = self._progress.add_task(
                description=self._make_desc(name=name, index=i, pad_width=pad_width),
                total=float(self._total[name]),
            )
        self._progress.start()

    def evaluation_completed(
        self, run_id: str, total_rows: int, elapsed_seconds: float
    ) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_ids = {}

    def model_started(self, run_id: str, model: str) -> None:
        pass

    def model_completed(self, run_id: str, model: str, elapsed_seconds: float) -> None:
        pass

    def model_failed(self, run_id: str, model: str, reason: str) -> None:
        # Remaining samples of a failed model will never be solved.
        if self._progress is not None and model in self._task_ids:
            self._progress.update(
                self._task_ids[model],
                description=f"[red]{model} (failed)[/red]",
            )

    def sample_solve_started(self, model: str, sample_id: str, epoch: int) -> None:
        pass

    def sample_solve_completed(
        self, model: str, sample_id: str, epoch: int, num_tool_calls: int
    ) -> None:
        self._advance(model=model)

    def sample_solve_failed(
        self, model: str, sample_id: str, epoch: int, reason: str
    ) -> None:
        self._advance(model=model)

    def scoring_started(self, model: str, epoch: int, eligible: int, total: int) -> None:
        pass

    def judge_request_failed(
        self,
        model: str,
        sample_id: str,
        epoch: int,
        attempt: int,
        reason: str,
        will_retry: bool,
    ) -> None:
        pass

    def scoring_completed(
        self, model: str, epoch: int, grade_counts: dict[str, int]
    ) -> None:
        pass
