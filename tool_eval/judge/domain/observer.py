"""JudgeObserver port — domain events emitted during judge requests."""

from typing import Protocol


class JudgeObserver(Protocol):
    """Observer port for judge domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def judge_request_started(self, model: str) -> None: ...

    def judge_request_completed(self, model: str, duration_ms: int) -> None: ...

    def judge_request_failed(self, model: str, reason: str) -> None: ...

    def judge_high_temperature_warned(self, model: str, temperature: float) -> None: ...
