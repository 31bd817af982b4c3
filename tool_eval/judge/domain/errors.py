"""Error types for the judge domain."""

from tool_eval.core.errors import ToolEvalError


class GradeParseError(ToolEvalError):
    """Raised when a judge response carries no recognizable GRADE token."""

    def __init__(self, levels: list[str]) -> None:
        super().__init__(
            "Failed to parse grade: judge response has no 'GRADE: <level>' token"
            f" for levels {levels}"
        )
