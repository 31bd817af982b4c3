"""PythonCodeRunner — executes sample code text with exec() in the sample's namespace."""

import warnings

from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.execution.domain.runner import CodePhase
from tool_eval.execution.infrastructure.errors import CodeExecutionError


class PythonCodeRunner:
    """Runs free-form Python source against an ExecutionContext's namespace.

    This is in-process execution with full interpreter access, not a sandbox:
    sample files are trusted the same way test code is. Warnings raised by the
    code are suppressed.
    """

    def run(self, code: str, context: ExecutionContext, phase: CodePhase) -> None:
        """
        Compile and execute code with the context namespace as its globals.

        Empty or whitespace-only code is a no-op.

        Raises:
            CodeExecutionError: on a syntax error or any exception from the code.
        """
        if not code.strip():
            return

        filename = f"<{context.sample_id}:{phase}>"
        try:
            compiled = compile(code, filename, "exec")
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                exec(compiled, context.namespace)
        except Exception as exc:
            raise CodeExecutionError(
                sample_id=context.sample_id,
                phase=phase,
                reason=f"{type(exc).__name__}: {exc}",
            ) from exc
