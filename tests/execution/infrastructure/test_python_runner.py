"""Tests for PythonCodeRunner — setup/teardown execution in a sample's namespace."""

import pytest

from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.execution.infrastructure.errors import CodeExecutionError
from tool_eval.execution.infrastructure.python_runner import PythonCodeRunner


class TestRun:
    def test_setup_binds_names_in_context(self) -> None:
        context = ExecutionContext(sample_id="s1")

        PythonCodeRunner().run(
            code="xs = list(range(3))\ntotal = sum(xs)", context=context, phase="setup"
        )

        assert context["xs"] == [0, 1, 2]
        assert context["total"] == 3

    def test_teardown_sees_setup_bindings(self) -> None:
        context = ExecutionContext(sample_id="s1")
        runner = PythonCodeRunner()
        runner.run(code="xs = [1]", context=context, phase="setup")

        runner.run(code="del xs", context=context, phase="teardown")

        assert "xs" not in context

    def test_comprehensions_see_namespace_globals(self) -> None:
        context = ExecutionContext(sample_id="s1")

        PythonCodeRunner().run(
            code="k = 3\nys = [k * x for x in range(3)]", context=context, phase="setup"
        )

        assert context["ys"] == [0, 3, 6]

    def test_blank_code_is_noop(self) -> None:
        context = ExecutionContext(sample_id="s1")

        PythonCodeRunner().run(code="   \n", context=context, phase="teardown")

        assert context.keys() == []

    def test_warnings_are_suppressed(self) -> None:
        context = ExecutionContext(sample_id="s1")

        PythonCodeRunner().run(
            code="import warnings\nwarnings.warn('noisy', UserWarning)\ndone = True",
            context=context,
            phase="setup",
        )

        assert context["done"] is True


class TestFailures:
    def test_runtime_error_raises_code_execution_error(self) -> None:
        context = ExecutionContext(sample_id="s1")

        with pytest.raises(CodeExecutionError) as exc_info:
            PythonCodeRunner().run(code="undefined_name", context=context, phase="setup")

        assert exc_info.value.sample_id == "s1"
        assert exc_info.value.phase == "setup"
        assert "NameError" in str(exc_info.value)

    def test_syntax_error_raises_code_execution_error(self) -> None:
        context = ExecutionContext(sample_id="s2")

        with pytest.raises(CodeExecutionError, match="SyntaxError"):
            PythonCodeRunner().run(code="def (:", context=context, phase="teardown")
