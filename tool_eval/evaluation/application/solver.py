"""Solver — runs every sample of a dataset against one model, one at a time."""

import asyncio

from tool_eval.chat.domain.chat import Chat
from tool_eval.chat.domain.transcript import Transcript
from tool_eval.config.domain.execution import ExecutionConfig
from tool_eval.config.domain.solver import SolverConfig
from tool_eval.core.errors import ToolEvalError
from tool_eval.dataset.domain.sample import Sample
from tool_eval.evaluation.domain.observer import EvaluationObserver
from tool_eval.evaluation.domain.solve import SolveResult
from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.execution.domain.runner import CodeRunner
from tool_eval.tools.domain.resolver import ToolResolver


class Solver:
    """Produces one SolveResult per sample, in input order.

    For each sample: a fresh ExecutionContext, setup code, a cloned chat with
    the sample's tool registered, the prompt, then teardown code. Samples are
    never run concurrently; the configured sleep separates consecutive
    samples (none after the last).

    With on_sample_error="abort" the first failing sample's error propagates.
    With "contain" it is recorded on that sample's SolveResult and the loop
    continues.
    """

    def __init__(
        self,
        config: SolverConfig,
        execution: ExecutionConfig,
        tool_resolver: ToolResolver,
        code_runner: CodeRunner,
        observer: EvaluationObserver,
    ) -> None:
        self._config = config
        self._execution = execution
        self._tool_resolver = tool_resolver
        self._code_runner = code_runner
        self._observer = observer

    async def solve(
        self,
        samples: list[Sample],
        chat: Chat,
        epoch: int = 0,
        model_name: str | None = None,
    ) -> list[SolveResult]:
        """
        Solve samples sequentially against chat.

        model_name labels observer events; it defaults to chat.model.

        Raises:
            ToolEvalError: the first sample failure, when on_sample_error is "abort".
        """
        label = model_name or chat.model
        results: list[SolveResult] = []

        for index, sample in enumerate(samples):
            if index > 0 and self._config.sleep_seconds > 0:
                await asyncio.sleep(self._config.sleep_seconds)

            self._observer.sample_solve_started(
                model=label, sample_id=sample.id, epoch=epoch
            )
            try:
                result = await self._solve_one(sample=sample, chat=chat, epoch=epoch)
            except ToolEvalError as exc:
                self._observer.sample_solve_failed(
                    model=label, sample_id=sample.id, epoch=epoch, reason=str(exc)
                )
                if self._execution.on_sample_error == "abort":
                    raise
                result = SolveResult(
                    sample_id=sample.id,
                    epoch=epoch,
                    response="",
                    transcript=Transcript(),
                    error=str(exc),
                )
            else:
                self._observer.sample_solve_completed(
                    model=label,
                    sample_id=sample.id,
                    epoch=epoch,
                    num_tool_calls=len(result.transcript.tool_calls()),
                )
            results.append(result)

        return results

    async def _solve_one(self, sample: Sample, chat: Chat, epoch: int) -> SolveResult:
        # Teardown runs only after a completed conversation; the context is
        # closed on every path.
        with ExecutionContext(sample_id=sample.id) as context:
            self._code_runner.run(code=sample.input.setup, context=context, phase="setup")

            session = chat.clone()
            if self._config.system_prompt:
                session.set_system_prompt(self._config.system_prompt)

            tool = self._tool_resolver.resolve(
                factory_name=sample.tool.factory,
                context=context,
                alias=sample.tool.alias,
            )
            session.register_tool(tool)

            transcript = await session.send(sample.input.prompt)

            self._code_runner.run(
                code=sample.input.teardown, context=context, phase="teardown"
            )

        return SolveResult(
            sample_id=sample.id,
            epoch=epoch,
            response=transcript.last_text(),
            transcript=transcript,
        )
