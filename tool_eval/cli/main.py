"""CLI entrypoint for tool-eval — typer app with a `run` command."""

import asyncio
import sys
import time
from pathlib import Path

import structlog
import typer

from tool_eval.chat.domain.chat import Chat
from tool_eval.chat.infrastructure.observer import StructlogChatObserver
from tool_eval.chat.infrastructure.registry import create_chat
from tool_eval.cli.output.aggregator import ModelAggregate, aggregate
from tool_eval.cli.output.writer import output_stem, write_outputs
from tool_eval.config.infrastructure.observer import StructlogConfigObserver
from tool_eval.config.infrastructure.yaml_loader import YamlConfigLoader
from tool_eval.core.errors import ToolEvalError
from tool_eval.dataset.infrastructure.observer import StructlogDatasetObserver
from tool_eval.dataset.infrastructure.yaml_loader import YamlDatasetLoader
from tool_eval.evaluation.application.runner import EvaluationRunner
from tool_eval.evaluation.domain.observer import EvaluationObserver
from tool_eval.evaluation.domain.summary import RunSummary
from tool_eval.evaluation.infrastructure.composite_observer import (
    CompositeEvaluationObserver,
)
from tool_eval.evaluation.infrastructure.observer import StructlogEvaluationObserver
from tool_eval.evaluation.infrastructure.progress_observer import (
    ProgressEvaluationObserver,
)
from tool_eval.judge.infrastructure.litellm import LiteLLMJudge
from tool_eval.judge.infrastructure.observer import StructlogJudgeObserver
from tool_eval.tools.infrastructure.builtin import register_builtin_tools
from tool_eval.tools.infrastructure.observer import StructlogToolObserver
from tool_eval.tools.infrastructure.registry import ToolRegistry

app = typer.Typer(add_completion=False)


@app.callback()
def main() -> None:
    """Evaluate whether models use a tool and describe what it shows."""


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_WHITE = "\033[97m"


def _accuracy_color(accuracy: float) -> str:
    if accuracy >= 0.8:
        return _GREEN
    if accuracy >= 0.5:
        return _YELLOW
    return _RED


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _format_elapsed(elapsed_seconds: float) -> str:
    """Format elapsed seconds as '1m 23.4s' or '5.2s'."""
    minutes, seconds = divmod(elapsed_seconds, 60)
    if minutes >= 1:
        return f"{int(minutes)}m {seconds:.1f}s"
    return f"{elapsed_seconds:.1f}s"


def _print_grade_table(aggregated: list[ModelAggregate], grade_levels: list[str]) -> None:
    """Models as rows, one column per grade level (worst first), then accuracy."""
    model_w = max([len("Model")] + [len(agg.model) for agg in aggregated])
    level_w = max([5] + [len(level) for level in grade_levels])

    header = f"  {_DIM}{'Model':<{model_w}}{_RESET}"
    for level in grade_levels:
        header += f"  {_CYAN}{_BOLD}{level:>{level_w}}{_RESET}"
    header += f"  {_DIM}{'Tool':>5}  {'Acc':>6}{_RESET}"
    typer.echo(header)
    typer.echo(f"  {'─' * (model_w + (level_w + 2) * len(grade_levels) + 15)}")

    for agg in aggregated:
        row = f"  {_WHITE}{agg.model:<{model_w}}{_RESET}"
        for level in grade_levels:
            row += f"  {agg.counts[level]:>{level_w}}"
        color = _accuracy_color(accuracy=agg.accuracy)
        row += f"  {agg.tool_called:>5}  {color}{agg.accuracy:>6.1%}{_RESET}"
        typer.echo(row)
        if agg.failure is not None:
            typer.echo(f"  {_RED}  failed: {agg.failure}{_RESET}")


def _print_summary(
    summary: RunSummary,
    aggregated: list[ModelAggregate],
    json_path: Path,
    jsonl_path: Path,
    elapsed_seconds: float,
) -> None:
    """Print a colorized run header and the per-model grade table to stdout."""
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  tool-eval  ·  Run Complete{_RESET}")
    _rule(color=_CYAN)
    typer.echo("")

    meta_rows: list[tuple[str, str]] = [
        ("Run ID", f"{summary.run_id[:8]}-..."),
        ("Task", summary.name),
        ("Dataset SHA256", f"{summary.dataset_sha256[:16]}..."),
        ("Models", ", ".join(summary.models)),
        ("Accepted tools", ", ".join(summary.accepted_tool_names)),
        ("Total rows", str(len(summary.rows))),
        ("Elapsed", _format_elapsed(elapsed_seconds=elapsed_seconds)),
        ("Summary JSON", str(json_path)),
        ("Results JSONL", str(jsonl_path)),
    ]
    label_w = max(len(label) for label, _ in meta_rows)
    for label, value in meta_rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")

    typer.echo("")
    _print_grade_table(aggregated=aggregated, grade_levels=summary.grade_levels)
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo("")


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Path to evaluation config YAML"),
    output_dir: Path = typer.Option(
        Path("./results"),
        "--output-dir",
        "-o",
        help="Directory for output files",
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Run a tool-eval evaluation from a YAML config file."""
    try:
        _configure_structlog(log_format=log_format)

        loader = YamlConfigLoader(observer=StructlogConfigObserver())
        try:
            config = loader.load(path=config_path)
        except ToolEvalError as exc:
            typer.echo(str(exc))
            raise typer.Exit(code=1) from exc

        output_dir.mkdir(parents=True, exist_ok=True)

        chat_observer = StructlogChatObserver()
        models: dict[str, Chat] = {
            name: create_chat(config=chat_config, observer=chat_observer)
            for name, chat_config in config.models.items()
        }

        tool_registry = ToolRegistry(observer=StructlogToolObserver())
        register_builtin_tools(registry=tool_registry)

        observers: list[EvaluationObserver] = [StructlogEvaluationObserver()]
        if log_format != "json":
            observers.append(ProgressEvaluationObserver())

        evaluation_runner = EvaluationRunner(
            config=config,
            dataset_loader=YamlDatasetLoader(observer=StructlogDatasetObserver()),
            tool_registry=tool_registry,
            judge=LiteLLMJudge(config=config.judge, observer=StructlogJudgeObserver()),
            observer=CompositeEvaluationObserver(observers=observers),
        )

        started_at = time.monotonic()
        summary = asyncio.run(evaluation_runner.run(models=models))
        elapsed_seconds = time.monotonic() - started_at

        aggregated = aggregate(summary=summary)
        json_path, jsonl_path = write_outputs(
            output_dir=output_dir,
            stem=output_stem(name=summary.name, run_id=summary.run_id),
            summary=summary,
            aggregated=aggregated,
        )

        _print_summary(
            summary=summary,
            aggregated=aggregated,
            json_path=json_path,
            jsonl_path=jsonl_path,
            elapsed_seconds=elapsed_seconds,
        )

    except KeyboardInterrupt:
        typer.echo("Evaluation interrupted.")
        sys.exit(1)
    except ToolEvalError as exc:
        typer.echo(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    app()
