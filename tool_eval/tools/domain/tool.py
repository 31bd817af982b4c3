"""Tool value object, ToolResult, and the ToolFactory contract."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeAlias

from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.tools.domain.errors import ToolExecutionError

JsonSchema: TypeAlias = dict[str, Any]


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool invocation. Exactly one of output/error is meaningful."""

    output: str = ""
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Tool:
    """A callable exposed to the model under a display name.

    parameters is the JSON schema object describing the keyword arguments
    accepted by func. A Tool lives for exactly one sample solve; func is
    usually bound to that sample's ExecutionContext.
    """

    name: str
    description: str
    func: Callable[..., Any]
    parameters: JsonSchema = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def invoke(self, arguments: Mapping[str, Any]) -> ToolResult:
        """Call func with arguments. Exceptions come back in-band, never raised."""
        try:
            value = self.func(**arguments)
        except Exception as exc:
            error = ToolExecutionError(
                tool_name=self.name, reason=f"{type(exc).__name__}: {exc}"
            )
            return ToolResult(error=str(error))
        return ToolResult(output=_as_text(value))


class ToolFactory(Protocol):
    """Builds a Tool bound to one sample's context.

    display_name is the alias requested by the sample, or None to use the
    factory's own default name.
    """

    def __call__(
        self, context: ExecutionContext, display_name: str | None
    ) -> Tool: ...


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return repr(value)
