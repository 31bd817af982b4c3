"""Scorer — gates on tool use, fans out judge requests, extracts grades."""

import asyncio
from collections import Counter
from collections.abc import Iterable

from tool_eval.config.domain.judge import JudgeConfig
from tool_eval.core.errors import ToolEvalError
from tool_eval.dataset.domain.sample import Sample
from tool_eval.evaluation.domain.observer import EvaluationObserver
from tool_eval.evaluation.domain.result import GradeResult
from tool_eval.evaluation.domain.solve import SolveResult
from tool_eval.judge.domain.errors import GradeParseError
from tool_eval.judge.domain.extract import parse_grade
from tool_eval.judge.domain.grade import GradeScale
from tool_eval.judge.domain.judge import Judge
from tool_eval.judge.domain.prompt import DEFAULT_JUDGE_INSTRUCTIONS, format_judge_prompt
from tool_eval.judge.infrastructure.errors import JudgeRequestError

_NOT_CALLED = "accepted tool was not called successfully"


class Scorer:
    """Grades a batch of SolveResults against their samples.

    A sample is eligible for judging only if its transcript contains a
    successful call to one of the accepted tool names. Ineligible samples get
    the worst grade without a judge request. Eligible prompts are sent all at
    once, bounded by max_concurrent and a per-request timeout, retried with
    exponential backoff while the failure is retriable. A failed request or an
    unparseable reply falls back to the worst grade with the reason recorded.
    """

    def __init__(
        self,
        config: JudgeConfig,
        judge: Judge,
        observer: EvaluationObserver,
    ) -> None:
        self._config = config
        self._judge = judge
        self._observer = observer
        self._scale = GradeScale(levels=config.grade_levels)
        self._instructions = config.instructions or DEFAULT_JUDGE_INSTRUCTIONS

    @property
    def scale(self) -> GradeScale:
        return self._scale

    async def score(
        self,
        solves: list[SolveResult],
        samples: list[Sample],
        accepted_tool_names: Iterable[str],
        model_name: str = "",
        epoch: int = 0,
    ) -> list[GradeResult]:
        """
        Return one GradeResult per solve, aligned with the input order.

        Raises:
            ValueError: if solves and samples differ in length.
        """
        if len(solves) != len(samples):
            raise ValueError(
                f"solves ({len(solves)}) and samples ({len(samples)}) must align"
            )

        accepted = set(accepted_tool_names)
        worst = self._scale.worst
        results: list[GradeResult | None] = [None] * len(solves)
        prompts: dict[int, str] = {}

        for index, (solve, sample) in enumerate(zip(solves, samples, strict=True)):
            if solve.error is not None:
                results[index] = GradeResult(
                    score=worst, tool_called=False, error=solve.error
                )
            elif not solve.transcript.called_tool(accepted):
                results[index] = GradeResult(
                    score=worst, tool_called=False, error=_NOT_CALLED
                )
            else:
                prompts[index] = format_judge_prompt(
                    task=sample.input.prompt,
                    target=sample.target,
                    response=solve.response,
                    instructions=self._instructions,
                )

        self._observer.scoring_started(
            model=model_name, epoch=epoch, eligible=len(prompts), total=len(solves)
        )

        if prompts:
            semaphore = asyncio.Semaphore(self._config.max_concurrent)
            async with asyncio.TaskGroup() as tg:
                tasks = {
                    index: tg.create_task(
                        self._grade(
                            prompt=prompt,
                            semaphore=semaphore,
                            model_name=model_name,
                            sample_id=samples[index].id,
                            epoch=epoch,
                        )
                    )
                    for index, prompt in prompts.items()
                }
            for index, task in tasks.items():
                results[index] = task.result()

        graded = [result for result in results if result is not None]
        self._observer.scoring_completed(
            model=model_name,
            epoch=epoch,
            grade_counts=dict(Counter(result.score.level for result in graded)),
        )
        return graded

    async def _grade(
        self,
        prompt: str,
        semaphore: asyncio.Semaphore,
        model_name: str,
        sample_id: str,
        epoch: int,
    ) -> GradeResult:
        try:
            response = await self._request(
                prompt=prompt,
                semaphore=semaphore,
                model_name=model_name,
                sample_id=sample_id,
                epoch=epoch,
            )
        except ToolEvalError as exc:
            return GradeResult(
                score=self._scale.worst,
                tool_called=True,
                judge_prompt=prompt,
                error=str(exc),
            )

        try:
            grade = parse_grade(text=response, scale=self._scale)
        except GradeParseError as exc:
            return GradeResult(
                score=self._scale.worst,
                tool_called=True,
                judge_prompt=prompt,
                judge_response=response,
                error=str(exc),
            )

        return GradeResult(
            score=grade,
            tool_called=True,
            judge_prompt=prompt,
            judge_response=response,
        )

    async def _request(
        self,
        prompt: str,
        semaphore: asyncio.Semaphore,
        model_name: str,
        sample_id: str,
        epoch: int,
    ) -> str:
        """Send one judge request with timeout and retry.

        The semaphore is held only while a request is in flight; backoff
        sleeps happen outside it.
        """
        retry = self._config.retry
        backoff = retry.initial_backoff_seconds

        for attempt in range(1, retry.max_attempts + 1):
            try:
                async with semaphore:
                    async with asyncio.timeout(self._config.timeout_seconds):
                        return await self._judge.complete(prompt)
            except TimeoutError:
                error: ToolEvalError = JudgeRequestError(
                    reason=f"timed out after {self._config.timeout_seconds}s",
                    retriable=True,
                )
            except ToolEvalError as exc:
                error = exc
            except Exception as exc:
                error = JudgeRequestError(
                    reason=f"{type(exc).__name__}: {exc}", retriable=False
                )

            will_retry = error.retriable and attempt < retry.max_attempts
            self._observer.judge_request_failed(
                model=model_name,
                sample_id=sample_id,
                epoch=epoch,
                attempt=attempt,
                reason=str(error),
                will_retry=will_retry,
            )
            if not will_retry:
                raise error

            await asyncio.sleep(backoff)
            backoff *= retry.backoff_multiplier

        raise AssertionError("unreachable: retry loop exits via return or raise")
