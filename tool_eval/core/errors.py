"""Base exception class for all tool-eval-specific errors."""


class ToolEvalError(Exception):
    """Base class for all tool-eval errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
