"""CodeRunner Protocol — runs setup/teardown code inside an ExecutionContext."""

from typing import Literal, Protocol, TypeAlias

from tool_eval.execution.domain.context import ExecutionContext

CodePhase: TypeAlias = Literal["setup", "teardown"]


class CodeRunner(Protocol):
    def run(self, code: str, context: ExecutionContext, phase: CodePhase) -> None: ...
