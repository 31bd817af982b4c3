"""Error types raised by execution infrastructure."""

from tool_eval.core.errors import ToolEvalError


class CodeExecutionError(ToolEvalError):
    """Raised when a sample's setup or teardown code fails to compile or run."""

    def __init__(self, sample_id: str, phase: str, reason: str) -> None:
        self.sample_id = sample_id
        self.phase = phase
        super().__init__(
            f"Failed to run {phase} code for sample '{sample_id}': {reason}"
        )
