"""Example tool module: a text-mode scatter summary over x/y data set up by a sample."""

from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.tools.infrastructure.registry import ToolRegistry, make_tool_factory


def describe_scatter(context: ExecutionContext, x: str, y: str) -> str:
    xs = [float(v) for v in context[x]]
    ys = [float(v) for v in context[y]]
    if len(xs) != len(ys) or len(xs) < 2:
        raise ValueError(f"'{x}' and '{y}' must be sequences of equal length >= 2")

    n = len(xs)
    mean_x = sum(xs) / n
    mean_y = sum(ys) / n
    cov = sum((a - mean_x) * (b - mean_y) for a, b in zip(xs, ys)) / (n - 1)
    var_x = sum((a - mean_x) ** 2 for a in xs) / (n - 1)
    var_y = sum((b - mean_y) ** 2 for b in ys) / (n - 1)
    r = cov / (var_x * var_y) ** 0.5 if var_x and var_y else 0.0

    return (
        f"Scatter of {y} against {x}: {n} points, "
        f"x range [{min(xs):.2f}, {max(xs):.2f}], "
        f"y range [{min(ys):.2f}, {max(ys):.2f}], "
        f"pearson r = {r:.3f}"
    )


def register_tools(registry: ToolRegistry) -> None:
    registry.register(
        factory_name="scatter",
        factory=make_tool_factory(
            executor=describe_scatter,
            default_name="create_plot",
            description=(
                "Plot y against x for two variables in the session and return a"
                " description of the resulting scatter plot."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "x": {"type": "string", "description": "Variable on the x axis."},
                    "y": {"type": "string", "description": "Variable on the y axis."},
                },
                "required": ["x", "y"],
            },
        ),
        default_name="create_plot",
    )
