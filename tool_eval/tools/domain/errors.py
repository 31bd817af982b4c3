"""Error types for the tools domain."""

from tool_eval.core.errors import ToolEvalError


class ToolExecutionError(ToolEvalError):
    """A tool's callable raised while handling a model's call.

    Never propagated: Tool.invoke() turns it into an in-band ToolResult error
    so the model sees the failure and the conversation continues.
    """

    def __init__(self, tool_name: str, reason: str) -> None:
        super().__init__(f"Failed to execute tool '{tool_name}': {reason}")
