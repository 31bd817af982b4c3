"""Result writers — JSONL rows plus a JSON run summary."""

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from tool_eval.cli.output.aggregator import ModelAggregate
from tool_eval.evaluation.domain.summary import RunSummary


def output_stem(name: str, run_id: str, now: datetime | None = None) -> str:
    """Build the output file stem: {name}_{YYYYMMDD}_{short_run_id}."""
    date_str = (now or datetime.now()).strftime("%Y%m%d")
    return f"{name}_{date_str}_{run_id[:8]}"


def build_summary_json(
    summary: RunSummary, aggregated: list[ModelAggregate], results_file: str
) -> dict[str, Any]:
    return {
        "run_id": summary.run_id,
        "name": summary.name,
        "dataset_sha256": summary.dataset_sha256,
        "grade_levels": summary.grade_levels,
        "accepted_tool_names": summary.accepted_tool_names,
        "total_rows": len(summary.rows),
        "results_file": results_file,
        "models": {agg.model: _model_entry(agg) for agg in aggregated},
    }


def write_outputs(
    output_dir: Path,
    stem: str,
    summary: RunSummary,
    aggregated: list[ModelAggregate],
) -> tuple[Path, Path]:
    """Write the JSON summary and JSONL rows. Returns (json_path, jsonl_path)."""
    json_path = output_dir / f"{stem}.json"
    jsonl_path = output_dir / f"{stem}.jsonl"

    summary_data = build_summary_json(
        summary=summary, aggregated=aggregated, results_file=jsonl_path.name
    )
    json_path.write_text(json.dumps(summary_data, indent=2), encoding="utf-8")

    lines = [json.dumps(row.to_record()) for row in summary.rows]
    jsonl_path.write_text(
        "\n".join(lines) + "\n" if lines else "",
        encoding="utf-8",
    )

    return json_path, jsonl_path


def _model_entry(agg: ModelAggregate) -> dict[str, Any]:
    entry = asdict(agg)
    del entry["model"]
    return entry
