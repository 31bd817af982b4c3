"""LiteLLMJudge — Judge implementation using LiteLLM free-text completions."""

import time

import litellm

from tool_eval.chat.infrastructure.litellm_chat import RETRIABLE_LITELLM_ERRORS
from tool_eval.config.domain.judge import JudgeConfig
from tool_eval.judge.domain.observer import JudgeObserver
from tool_eval.judge.infrastructure.errors import JudgeRequestError

_SYSTEM_PROMPT = (
    "You are a careful grader. Follow the grading instructions in the user"
    " message exactly and end your reply with the requested GRADE line."
)


class LiteLLMJudge:
    """Judge that sends each prompt as one stateless litellm completion.

    Instances hold no per-request state, so one judge serves every concurrent
    request of a run.
    """

    def __init__(self, config: JudgeConfig, observer: JudgeObserver) -> None:
        self._config = config
        self._observer = observer

        if config.temperature > 0.0:
            self._observer.judge_high_temperature_warned(
                model=config.model, temperature=config.temperature
            )

    @property
    def model(self) -> str:
        return self._config.model

    async def complete(self, prompt: str) -> str:
        """Invoke the judge model and return its reply text.

        Raises:
            JudgeRequestError: if the LLM call fails or the reply has no text.
        """
        self._observer.judge_request_started(model=self._config.model)

        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except Exception as exc:
            reason = str(exc)
            self._observer.judge_request_failed(model=self._config.model, reason=reason)
            raise JudgeRequestError(
                reason=reason, retriable=isinstance(exc, RETRIABLE_LITELLM_ERRORS)
            ) from exc

        duration_ms = int((time.monotonic() - start) * 1000)

        content: str | None = (
            response.choices[0].message.content if response.choices else None
        )
        if not content:
            reason = "judge returned an empty response"
            self._observer.judge_request_failed(model=self._config.model, reason=reason)
            raise JudgeRequestError(reason=reason)

        self._observer.judge_request_completed(
            model=self._config.model, duration_ms=duration_ms
        )
        return content
