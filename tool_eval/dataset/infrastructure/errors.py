"""Error types raised by dataset infrastructure."""

from pathlib import Path

from tool_eval.core.errors import ToolEvalError


class DatasetLoadError(ToolEvalError):
    """Raised when sample files cannot be found, read, or parsed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load dataset: {reason}")


class DatasetValidationError(ToolEvalError):
    """Raised when a sample document is malformed or misses a required field.

    ``field`` holds the dotted name of the offending field, e.g. ``input.setup``.
    """

    def __init__(self, file: Path, field: str, reason: str) -> None:
        self.file = file
        self.field = field
        super().__init__(f"Failed to load dataset: sample in {file} {reason}")
