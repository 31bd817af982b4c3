"""Transcript, Turn, and ToolCall — the ordered record of one conversation."""

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, Field

from tool_eval.chat.domain.usage import UsageMetrics

TurnRole: TypeAlias = Literal["user", "assistant", "tool_result"]


class ToolCall(BaseModel, frozen=True):
    """One tool invocation requested by the model and its outcome."""

    tool_call_id: str
    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    result: str | None = None
    error: str | None = None  # None iff the call succeeded
    duration_ms: float | None = None  # None when no result was ever received

    @property
    def succeeded(self) -> bool:
        return self.error is None


class Turn(BaseModel, frozen=True):
    """One turn of the conversation.

    role="user" and role="assistant" carry text; role="tool_result" carries the
    resolved tool_calls and has no text.
    """

    turn_idx: int
    role: TurnRole
    text: str | None = None
    tool_calls: list[ToolCall] = Field(default_factory=list)


class Transcript(BaseModel, frozen=True):
    turns: list[Turn] = Field(default_factory=list)
    usage: UsageMetrics | None = None

    def last_text(self) -> str:
        """Text of the final assistant turn, or "" if the model never replied."""
        for turn in reversed(self.turns):
            if turn.role == "assistant" and turn.text:
                return turn.text
        return ""

    def tool_calls(self) -> list[ToolCall]:
        """Every resolved tool call, in conversation order."""
        return [
            call
            for turn in self.turns
            if turn.role == "tool_result"
            for call in turn.tool_calls
        ]

    def called_tool(self, tool_names: set[str] | list[str]) -> bool:
        """True if any tool named in tool_names was called and succeeded."""
        names = set(tool_names)
        return any(
            call.tool_name in names and call.succeeded for call in self.tool_calls()
        )
