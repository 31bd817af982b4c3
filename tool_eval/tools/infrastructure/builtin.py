"""Built-in tools available to every dataset without a tool module."""

import ast
import contextlib
import io

from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.tools.infrastructure.registry import ToolRegistry, make_tool_factory

RUN_PYTHON = "run_python"

_RUN_PYTHON_DESCRIPTION = (
    "Execute Python code in the current session. Variables defined by earlier"
    " calls and by the task setup are available. Returns printed output and the"
    " value of a trailing expression."
)

_RUN_PYTHON_PARAMETERS = {
    "type": "object",
    "properties": {
        "code": {"type": "string", "description": "Python source code to execute."},
    },
    "required": ["code"],
}


def run_python(context: ExecutionContext, code: str) -> str:
    """Execute code in the sample's namespace, REPL-style."""
    module = ast.parse(code, mode="exec")
    trailing: ast.Expression | None = None
    if module.body and isinstance(module.body[-1], ast.Expr):
        last = module.body.pop()
        assert isinstance(last, ast.Expr)
        trailing = ast.Expression(body=last.value)

    buffer = io.StringIO()
    value = None
    with contextlib.redirect_stdout(buffer):
        exec(compile(module, "<run_python>", "exec"), context.namespace)
        if trailing is not None:
            value = eval(compile(trailing, "<run_python>", "eval"), context.namespace)

    output = buffer.getvalue()
    if value is not None:
        output += repr(value)
    return output


def register_builtin_tools(registry: ToolRegistry) -> None:
    registry.register(
        factory_name=RUN_PYTHON,
        factory=make_tool_factory(
            executor=run_python,
            default_name=RUN_PYTHON,
            description=_RUN_PYTHON_DESCRIPTION,
            parameters=_RUN_PYTHON_PARAMETERS,
        ),
        default_name=RUN_PYTHON,
    )
