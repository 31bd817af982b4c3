"""Structlog implementation of the ChatObserver port."""

import structlog


class StructlogChatObserver:
    """Delegates chat domain events to structlog.

    Satisfies the ChatObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def chat_send_started(self, model: str, tool_names: list[str]) -> None:
        self._log.info("chat.send_started", model=model, tool_names=tool_names)

    def chat_tool_called(
        self, model: str, tool_name: str, succeeded: bool, duration_ms: float | None
    ) -> None:
        self._log.debug(
            "chat.tool_called",
            model=model,
            tool_name=tool_name,
            succeeded=succeeded,
            duration_ms=duration_ms,
        )

    def chat_send_completed(
        self,
        model: str,
        duration_ms: int,
        num_turns: int,
        num_tool_calls: int,
    ) -> None:
        self._log.info(
            "chat.send_completed",
            model=model,
            duration_ms=duration_ms,
            num_turns=num_turns,
            num_tool_calls=num_tool_calls,
        )

    def chat_send_failed(self, model: str, reason: str) -> None:
        self._log.error("chat.send_failed", model=model, reason=reason)
