"""YAML dataset loader — one sample per file, validated and sorted by id."""

import hashlib
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tool_eval.config.domain.dataset import DatasetConfig, FieldMapping, InputField
from tool_eval.dataset.domain.load_result import DatasetLoadResult
from tool_eval.dataset.domain.observer import DatasetObserver
from tool_eval.dataset.domain.sample import Sample
from tool_eval.dataset.infrastructure.errors import (
    DatasetLoadError,
    DatasetValidationError,
)

_YAML_SUFFIXES = (".yaml", ".yml")
# Accepted spelling for the factory key when the configured one is absent.
_TOOL_FACTORY_FALLBACK = "factory"


class YamlDatasetLoader:
    """Loads a directory (or explicit list) of YAML sample files.

    Each file holds exactly one sample::

        id: positive_correlation
        type: baseline            # optional
        tool:
          name: run_python        # registered factory name
          alias: make_plot        # optional display name
        input:
          setup: |
            xs = list(range(20))
          teardown: |
            del xs
          prompt: |
            Describe the relationship between x and y.
        target: |
          The data shows a positive correlation.
        metadata:                 # optional, scalar values; result column names are reserved
          difficulty: easy
    """

    def __init__(self, observer: DatasetObserver) -> None:
        self._observer = observer

    def load(self, config: DatasetConfig) -> DatasetLoadResult:
        """
        Load, validate, and sort every sample described by config.

        Validation stops at the first malformed sample.

        Raises:
            DatasetLoadError: if no sample files exist or a file is not valid YAML.
            DatasetValidationError: if a sample misses a required field, has a
                field of the wrong shape, or reuses another sample's id.
        """
        path_str = _describe(config.path)

        try:
            files = _discover_files(path=config.path)
        except DatasetLoadError as exc:
            self._observer.dataset_loading_failed(path=path_str, reason=str(exc))
            raise

        self._observer.dataset_loading_started(path=path_str, file_count=len(files))

        digest = hashlib.sha256()
        samples: list[Sample] = []
        seen: dict[str, Path] = {}
        try:
            for file in files:
                raw_bytes = _read_bytes(file=file)
                digest.update(raw_bytes)
                sample = self._parse_sample(file=file, raw_bytes=raw_bytes, config=config)
                if sample.id in seen:
                    raise DatasetValidationError(
                        file=file,
                        field="id",
                        reason=f"reuses id '{sample.id}' already defined in {seen[sample.id]}",
                    )
                seen[sample.id] = file
                samples.append(sample)
                self._observer.dataset_sample_loaded(sample_id=sample.id, file=str(file))
        except (DatasetLoadError, DatasetValidationError) as exc:
            self._observer.dataset_loading_failed(path=path_str, reason=str(exc))
            raise

        samples.sort(key=lambda s: s.id)
        self._observer.dataset_loading_completed(
            path=path_str,
            total_samples=len(samples),
        )
        return DatasetLoadResult(samples=samples, sha256=digest.hexdigest())

    def _parse_sample(
        self, file: Path, raw_bytes: bytes, config: DatasetConfig
    ) -> Sample:
        try:
            document = yaml.safe_load(raw_bytes)
        except yaml.YAMLError as exc:
            raise DatasetLoadError(reason=f"failed to read {file}: {exc}") from exc

        if not isinstance(document, dict):
            raise DatasetValidationError(
                file=file, field="<root>", reason="is not a YAML mapping"
            )

        if config.validate_samples:
            _validate(
                document=document,
                file=file,
                fields=config.fields,
                required_fields=config.required_fields,
            )

        return _build_sample(document=document, file=file, fields=config.fields)


def _describe(path: Path | list[Path]) -> str:
    if isinstance(path, list):
        return ", ".join(str(p) for p in path)
    return str(path)


def _discover_files(path: Path | list[Path]) -> list[Path]:
    """Return the YAML files in a directory, or the explicit list given."""
    if isinstance(path, Path) and path.is_dir():
        files = sorted(
            p for p in path.iterdir() if p.is_file() and p.suffix in _YAML_SUFFIXES
        )
    elif isinstance(path, list):
        files = list(path)
    else:
        files = [path]

    if not files:
        raise DatasetLoadError(reason=f"no YAML files found at {_describe(path)}")
    return files


def _read_bytes(file: Path) -> bytes:
    try:
        return file.read_bytes()
    except FileNotFoundError as exc:
        raise DatasetLoadError(reason=f"file not found: {file}") from exc


def _validate(
    document: dict[str, Any],
    file: Path,
    fields: FieldMapping,
    required_fields: list[InputField],
) -> None:
    """Raise DatasetValidationError naming the first missing field."""
    for key in ("id", "input", "target", "tool"):
        if document.get(key) is None:
            raise DatasetValidationError(
                file=file, field=key, reason=f"is missing required field '{key}'"
            )

    tool = document["tool"]
    if not isinstance(tool, dict) or _tool_factory(tool, fields) is None:
        raise DatasetValidationError(
            file=file,
            field=f"tool.{fields.tool_factory}",
            reason=f"has tool specification without '{fields.tool_factory}'",
        )

    sample_input = document["input"]
    if not isinstance(sample_input, dict):
        raise DatasetValidationError(
            file=file, field="input", reason="has an 'input' that is not a mapping"
        )

    for logical_name in required_fields:
        key = getattr(fields, logical_name)
        if sample_input.get(key) is None:
            raise DatasetValidationError(
                file=file,
                field=f"input.{key}",
                reason=f"is missing required input field '{key}'",
            )


def _tool_factory(tool: dict[str, Any], fields: FieldMapping) -> Any:
    value = tool.get(fields.tool_factory)
    if value is None:
        value = tool.get(_TOOL_FACTORY_FALLBACK)
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _build_sample(document: dict[str, Any], file: Path, fields: FieldMapping) -> Sample:
    tool = document.get("tool") or {}
    sample_input = document.get("input") or {}
    if not isinstance(tool, dict) or not isinstance(sample_input, dict):
        raise DatasetValidationError(
            file=file, field="tool", reason="has a malformed 'tool' or 'input' block"
        )

    alias = tool.get(fields.tool_alias)
    factory = _tool_factory(tool, fields)
    sample_type = document.get("type")
    try:
        return Sample(
            id=_text(document.get("id")),
            type=None if sample_type is None else str(sample_type),
            tool={
                "factory": _text(factory),
                "alias": None if alias is None else str(alias),
            },
            input={
                "prompt": _text(sample_input.get(fields.prompt)),
                "setup": _text(sample_input.get(fields.setup)),
                "teardown": _text(sample_input.get(fields.teardown)),
            },
            target=_text(document.get("target")),
            metadata=document.get("metadata") or {},
        )
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise DatasetValidationError(
            file=file, field=field, reason=f"has invalid field '{field}': {first['msg']}"
        ) from exc
