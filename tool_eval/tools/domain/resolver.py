"""ToolResolver Protocol — what the solver needs from a tool registry."""

from typing import Protocol

from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.tools.domain.tool import Tool


class ToolResolver(Protocol):
    def resolve(
        self, factory_name: str, context: ExecutionContext, alias: str | None = None
    ) -> Tool: ...

    def display_name(self, factory_name: str, alias: str | None = None) -> str: ...
