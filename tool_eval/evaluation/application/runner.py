"""EvaluationRunner — runs the solve/score pipeline for every model and epoch."""

import asyncio
import time
import uuid

from tool_eval.chat.domain.chat import Chat
from tool_eval.config.domain.config import EvalConfig
from tool_eval.core.errors import ToolEvalError
from tool_eval.dataset.domain.loader import DatasetLoader
from tool_eval.dataset.domain.sample import Sample
from tool_eval.evaluation.application.scorer import Scorer
from tool_eval.evaluation.application.solver import Solver
from tool_eval.evaluation.domain.observer import EvaluationObserver
from tool_eval.evaluation.domain.result import ResultMetadata, ResultRow
from tool_eval.evaluation.domain.summary import EpochRun, ModelRun, RunSummary
from tool_eval.execution.domain.runner import CodeRunner
from tool_eval.execution.infrastructure.python_runner import PythonCodeRunner
from tool_eval.judge.domain.judge import Judge
from tool_eval.tools.infrastructure.registry import ToolRegistry


class EvaluationRunner:
    """Runs the full evaluation: loads samples and tools, then solves and scores per model.

    The runner receives the dataset loader, tool registry and judge from the
    caller, and the chat handles per run, so tests can substitute fakes for
    every model and judge call.
    """

    def __init__(
        self,
        config: EvalConfig,
        dataset_loader: DatasetLoader,
        tool_registry: ToolRegistry,
        judge: Judge,
        observer: EvaluationObserver,
        code_runner: CodeRunner | None = None,
    ) -> None:
        self._config = config
        self._dataset_loader = dataset_loader
        self._tool_registry = tool_registry
        self._observer = observer
        self._solver = Solver(
            config=config.solver,
            execution=config.execution,
            tool_resolver=tool_registry,
            code_runner=code_runner or PythonCodeRunner(),
            observer=observer,
        )
        self._scorer = Scorer(config=config.judge, judge=judge, observer=observer)

    async def run(self, models: dict[str, Chat]) -> RunSummary:
        """Execute the evaluation for every model and return a RunSummary.

        Models run one after another unless parallel_models is set; the samples
        of one model are always solved sequentially. Every model sees fresh
        execution contexts in every epoch.

        Raises:
            ValueError: if models is empty.
            ToolEvalError: dataset or tool module loading failures, and any model
                failure unless isolate_model_failures is set.
        """
        if not models:
            raise ValueError("at least one model is required")

        run_id = str(uuid.uuid4())
        load_result = self._dataset_loader.load(config=self._config.dataset)
        samples = load_result.samples

        for module in self._config.tools.modules:
            self._tool_registry.load_module(path=module)
        accepted = self._accepted_tool_names(samples=samples)

        self._observer.evaluation_started(
            run_id=run_id,
            total_samples=len(samples),
            model_names=list(models),
            num_epochs=self._config.execution.epochs,
            accepted_tool_names=accepted,
        )
        started_at = time.monotonic()

        if self._config.execution.parallel_models:
            try:
                async with asyncio.TaskGroup() as tg:
                    tasks = {
                        name: tg.create_task(
                            self._run_model(
                                run_id=run_id,
                                name=name,
                                chat=chat,
                                samples=samples,
                                accepted=accepted,
                            )
                        )
                        for name, chat in models.items()
                    }
            except ExceptionGroup as eg:
                # Observer was already called inside _run_model for each failure.
                errors = [e for e in eg.exceptions if isinstance(e, ToolEvalError)]
                if not errors:
                    raise
                raise errors[0]
            model_runs = {name: task.result() for name, task in tasks.items()}
        else:
            model_runs = {}
            for name, chat in models.items():
                model_runs[name] = await self._run_model(
                    run_id=run_id,
                    name=name,
                    chat=chat,
                    samples=samples,
                    accepted=accepted,
                )

        rows = _build_rows(model_runs=model_runs, samples=samples)

        self._observer.evaluation_completed(
            run_id=run_id,
            total_rows=len(rows),
            elapsed_seconds=time.monotonic() - started_at,
        )

        return RunSummary(
            run_id=run_id,
            name=self._config.name,
            dataset_sha256=load_result.sha256,
            grade_levels=list(self._scorer.scale.levels),
            accepted_tool_names=accepted,
            rows=rows,
            models=model_runs,
        )

    async def _run_model(
        self,
        run_id: str,
        name: str,
        chat: Chat,
        samples: list[Sample],
        accepted: list[str],
    ) -> ModelRun:
        self._observer.model_started(run_id=run_id, model=name)
        started_at = time.monotonic()
        epochs: list[EpochRun] = []

        try:
            for epoch in range(self._config.execution.epochs):
                solves = await self._solver.solve(
                    samples=samples, chat=chat, epoch=epoch, model_name=name
                )
                grades = await self._scorer.score(
                    solves=solves,
                    samples=samples,
                    accepted_tool_names=accepted,
                    model_name=name,
                    epoch=epoch,
                )
                epochs.append(EpochRun(epoch=epoch, solves=solves, grades=grades))
        except ToolEvalError as exc:
            self._observer.model_failed(run_id=run_id, model=name, reason=str(exc))
            if not self._config.execution.isolate_model_failures:
                raise
            return ModelRun(model=name, epochs=epochs, error=str(exc))

        self._observer.model_completed(
            run_id=run_id,
            model=name,
            elapsed_seconds=time.monotonic() - started_at,
        )
        return ModelRun(model=name, epochs=epochs)

    def _accepted_tool_names(self, samples: list[Sample]) -> list[str]:
        """Configured names, or every display name the dataset's tools resolve to."""
        configured = self._config.tools.accepted_names
        if configured is not None:
            return list(configured)
        return sorted(
            {
                self._tool_registry.display_name(
                    factory_name=sample.tool.factory, alias=sample.tool.alias
                )
                for sample in samples
            }
        )


def _build_rows(model_runs: dict[str, ModelRun], samples: list[Sample]) -> list[ResultRow]:
    by_id = {sample.id: sample for sample in samples}
    rows: list[ResultRow] = []
    for name, model_run in model_runs.items():
        for epoch_run in model_run.epochs:
            for solve, grade in zip(epoch_run.solves, epoch_run.grades, strict=True):
                sample = by_id[solve.sample_id]
                rows.append(
                    ResultRow(
                        model=name,
                        id=sample.id,
                        epoch=epoch_run.epoch,
                        score=grade.score,
                        metadata=ResultMetadata(
                            judge_prompt=grade.judge_prompt,
                            judge_response=grade.judge_response,
                            tool_called=grade.tool_called,
                            error=grade.error,
                        ),
                        sample_type=sample.type,
                        sample_metadata=dict(sample.metadata),
                    )
                )
    rows.sort(key=lambda r: (r.model, r.id, r.epoch))
    return rows
