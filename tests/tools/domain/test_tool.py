"""Tests for Tool.invoke — results and in-band errors."""

from tool_eval.tools.domain.tool import Tool, ToolResult


def _make_tool(func: object, name: str = "create_plot") -> Tool:
    return Tool(name=name, description="Plot things.", func=func)  # type: ignore[arg-type]


class TestInvoke:
    def test_returns_string_output(self) -> None:
        tool = _make_tool(lambda x: f"plotted {x}")

        result = tool.invoke({"x": "xs"})

        assert result == ToolResult(output="plotted xs")
        assert result.succeeded is True

    def test_non_string_output_is_repr(self) -> None:
        result = _make_tool(lambda: {"r": 0.9}).invoke({})

        assert result.output == "{'r': 0.9}"

    def test_none_output_is_empty_string(self) -> None:
        assert _make_tool(lambda: None).invoke({}).output == ""

    def test_exception_becomes_in_band_error(self) -> None:
        def explode(x: str) -> str:
            raise ValueError(f"no variable named {x}")

        result = _make_tool(explode).invoke({"x": "zs"})

        assert result.succeeded is False
        assert result.error is not None
        assert "create_plot" in result.error
        assert "ValueError: no variable named zs" in result.error

    def test_unexpected_arguments_become_in_band_error(self) -> None:
        result = _make_tool(lambda x: x).invoke({"y": 1})

        assert result.succeeded is False
        assert "TypeError" in (result.error or "")

    def test_default_parameters_schema_is_empty_object(self) -> None:
        assert _make_tool(lambda: "").parameters == {"type": "object", "properties": {}}
