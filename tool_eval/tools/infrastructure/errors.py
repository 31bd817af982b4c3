"""Error types raised by tool infrastructure."""

from pathlib import Path

from tool_eval.core.errors import ToolEvalError


class ToolResolutionError(ToolEvalError):
    """Raised when a sample names a factory the registry does not know, or the factory fails."""

    def __init__(self, factory_name: str, reason: str = "no factory registered") -> None:
        self.factory_name = factory_name
        super().__init__(f"Failed to resolve tool '{factory_name}': {reason}")


class DuplicateToolFactoryError(ToolEvalError):
    """Raised when a factory name is registered twice."""

    def __init__(self, factory_name: str) -> None:
        super().__init__(
            f"Failed to register tool factory: '{factory_name}' is already registered"
        )


class ToolModuleLoadError(ToolEvalError):
    """Raised when a tool module cannot be imported or lacks register_tools()."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to load tool module {path}: {reason}")
