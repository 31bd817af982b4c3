"""ChatObserver port — domain events emitted while talking to a model."""

from typing import Protocol


class ChatObserver(Protocol):
    """Observer port for chat domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def chat_send_started(self, model: str, tool_names: list[str]) -> None: ...

    def chat_tool_called(
        self, model: str, tool_name: str, succeeded: bool, duration_ms: float | None
    ) -> None: ...

    def chat_send_completed(
        self,
        model: str,
        duration_ms: int,
        num_turns: int,
        num_tool_calls: int,
    ) -> None: ...

    def chat_send_failed(self, model: str, reason: str) -> None: ...
