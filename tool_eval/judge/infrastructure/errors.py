"""Error types raised by judge infrastructure."""

from tool_eval.core.errors import ToolEvalError


class JudgeRequestError(ToolEvalError):
    """Raised when the judge cannot be invoked, times out, or returns no text."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to request judgment: {reason}", retriable=retriable)
