"""Error types for the execution domain."""

from tool_eval.core.errors import ToolEvalError


class ExecutionContextClosedError(ToolEvalError):
    """Raised when a disposed ExecutionContext is accessed."""

    def __init__(self, sample_id: str) -> None:
        super().__init__(
            f"Failed to access execution context: context for sample '{sample_id}'"
            " is already closed"
        )
