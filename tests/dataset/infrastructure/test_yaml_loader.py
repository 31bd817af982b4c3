"""Tests for YamlDatasetLoader — discovery, validation, and ordering of samples."""

import hashlib
from pathlib import Path

import pytest
import yaml

from tool_eval.config.domain.dataset import DatasetConfig, FieldMapping
from tool_eval.dataset.infrastructure.errors import (
    DatasetLoadError,
    DatasetValidationError,
)
from tool_eval.dataset.infrastructure.yaml_loader import YamlDatasetLoader
from tests.dataset.fake_observer import FakeDatasetObserver

# __file__ is tests/dataset/infrastructure/test_yaml_loader.py
SAMPLES = Path(__file__).parent.parent.parent / "fixtures" / "samples"

_VALID_SAMPLE = """\
id: {id}
tool:
  name: scatter
input:
  setup: x = 1
  teardown: del x
  prompt: Describe x.
target: x is one.
"""


def _make_loader() -> tuple[YamlDatasetLoader, FakeDatasetObserver]:
    observer = FakeDatasetObserver()
    return YamlDatasetLoader(observer=observer), observer


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(content, encoding="utf-8")
    return path


class TestDirectoryLoading:
    """A directory of YAML files loads one sample per file."""

    def test_dataset_size_equals_yaml_file_count(self) -> None:
        loader, _ = _make_loader()

        result = loader.load(config=DatasetConfig(path=SAMPLES))

        yaml_files = [p for p in SAMPLES.iterdir() if p.suffix in (".yaml", ".yml")]
        assert len(result.samples) == len(yaml_files) == 3

    def test_samples_are_sorted_by_id(self) -> None:
        loader, _ = _make_loader()

        result = loader.load(config=DatasetConfig(path=SAMPLES))

        assert [s.id for s in result.samples] == ["aliased", "negative", "positive"]

    def test_ids_are_unique(self) -> None:
        loader, _ = _make_loader()

        result = loader.load(config=DatasetConfig(path=SAMPLES))

        ids = [s.id for s in result.samples]
        assert len(ids) == len(set(ids))

    def test_parses_tool_spec_and_alias(self) -> None:
        loader, _ = _make_loader()

        samples = {s.id: s for s in loader.load(DatasetConfig(path=SAMPLES)).samples}

        assert samples["aliased"].tool.factory == "scatter"
        assert samples["aliased"].tool.alias == "make_plot"
        assert samples["positive"].tool.alias is None

    def test_accepts_factory_key_as_tool_name(self) -> None:
        loader, _ = _make_loader()

        samples = {s.id: s for s in loader.load(DatasetConfig(path=SAMPLES)).samples}

        assert samples["negative"].tool.factory == "scatter"

    def test_parses_input_target_type_and_metadata(self) -> None:
        loader, _ = _make_loader()

        samples = {s.id: s for s in loader.load(DatasetConfig(path=SAMPLES)).samples}
        positive = samples["positive"]

        assert positive.type == "baseline"
        assert "xs = list(range(10))" in positive.input.setup
        assert positive.input.prompt.startswith("Plot ys")
        assert positive.target == "The data shows a positive correlation."
        assert positive.metadata == {"difficulty": "easy", "points": 10}
        assert samples["aliased"].type is None
        assert samples["aliased"].metadata == {}

    def test_sha256_covers_files_in_sorted_order(self) -> None:
        loader, _ = _make_loader()

        result = loader.load(config=DatasetConfig(path=SAMPLES))

        digest = hashlib.sha256()
        for path in sorted(p for p in SAMPLES.iterdir() if p.suffix in (".yaml", ".yml")):
            digest.update(path.read_bytes())
        assert result.sha256 == digest.hexdigest()

    def test_emits_observer_events(self) -> None:
        loader, observer = _make_loader()

        loader.load(config=DatasetConfig(path=SAMPLES))

        assert observer.loading_started[0].file_count == 3
        assert len(observer.samples_loaded) == 3
        assert observer.loading_completed[0].total_samples == 3
        assert observer.loading_failed == []


class TestExplicitFileList:
    def test_loads_only_listed_files(self) -> None:
        loader, _ = _make_loader()

        result = loader.load(
            config=DatasetConfig(
                path=[SAMPLES / "03_negative.yaml", SAMPLES / "01_positive.yaml"]
            )
        )

        assert [s.id for s in result.samples] == ["negative", "positive"]

    def test_missing_listed_file_raises_load_error(self, tmp_path: Path) -> None:
        loader, observer = _make_loader()

        with pytest.raises(DatasetLoadError, match="file not found"):
            loader.load(config=DatasetConfig(path=[tmp_path / "missing.yaml"]))

        assert len(observer.loading_failed) == 1


class TestLoadErrors:
    def test_empty_directory_raises_load_error(self, tmp_path: Path) -> None:
        loader, observer = _make_loader()

        with pytest.raises(DatasetLoadError, match="no YAML files"):
            loader.load(config=DatasetConfig(path=tmp_path))

        assert observer.loading_failed[0].path == str(tmp_path)

    def test_invalid_yaml_raises_load_error(self, tmp_path: Path) -> None:
        _write(tmp_path, "bad.yaml", "id: [unclosed\n")
        loader, _ = _make_loader()

        with pytest.raises(DatasetLoadError, match="failed to read"):
            loader.load(config=DatasetConfig(path=tmp_path))


class TestValidation:
    """Malformed samples raise DatasetValidationError naming the offending field."""

    @pytest.mark.parametrize("field", ["id", "input", "target", "tool"])
    def test_missing_top_level_field_is_named(self, tmp_path: Path, field: str) -> None:
        document = yaml.safe_load(_VALID_SAMPLE.format(id="s1"))
        del document[field]
        _write(tmp_path, "s1.yaml", yaml.safe_dump(document))
        loader, _ = _make_loader()

        with pytest.raises(DatasetValidationError) as exc_info:
            loader.load(config=DatasetConfig(path=tmp_path))

        assert exc_info.value.field == field
        assert f"'{field}'" in str(exc_info.value)

    def test_missing_required_input_field_is_named(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "s1.yaml",
            _VALID_SAMPLE.format(id="s1").replace("  teardown: del x\n", ""),
        )
        loader, _ = _make_loader()

        with pytest.raises(DatasetValidationError) as exc_info:
            loader.load(config=DatasetConfig(path=tmp_path))

        assert exc_info.value.field == "input.teardown"

    def test_input_field_not_required_is_optional(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "s1.yaml",
            _VALID_SAMPLE.format(id="s1").replace("  teardown: del x\n", ""),
        )
        loader, _ = _make_loader()

        result = loader.load(
            config=DatasetConfig(path=tmp_path, required_fields=["setup", "prompt"])
        )

        assert result.samples[0].input.teardown == ""

    def test_tool_without_name_is_rejected(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "s1.yaml",
            _VALID_SAMPLE.format(id="s1").replace("  name: scatter", "  alias: plot"),
        )
        loader, _ = _make_loader()

        with pytest.raises(DatasetValidationError) as exc_info:
            loader.load(config=DatasetConfig(path=tmp_path))

        assert exc_info.value.field == "tool.name"

    def test_duplicate_id_is_rejected(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.yaml", _VALID_SAMPLE.format(id="same"))
        _write(tmp_path, "b.yaml", _VALID_SAMPLE.format(id="same"))
        loader, _ = _make_loader()

        with pytest.raises(DatasetValidationError) as exc_info:
            loader.load(config=DatasetConfig(path=tmp_path))

        assert exc_info.value.field == "id"
        assert exc_info.value.file == tmp_path / "b.yaml"

    def test_reserved_metadata_key_is_rejected(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "s1.yaml",
            _VALID_SAMPLE.format(id="s1") + "metadata:\n  difficulty: easy\n  score: 5\n",
        )
        loader, _ = _make_loader()

        with pytest.raises(DatasetValidationError, match="score") as exc_info:
            loader.load(config=DatasetConfig(path=tmp_path))

        assert exc_info.value.field == "metadata"
        assert exc_info.value.file == tmp_path / "s1.yaml"

    def test_non_mapping_document_is_rejected(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.yaml", "- just\n- a list\n")
        loader, _ = _make_loader()

        with pytest.raises(DatasetValidationError, match="not a YAML mapping"):
            loader.load(config=DatasetConfig(path=tmp_path))

    def test_validation_stops_at_first_bad_file(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.yaml", _VALID_SAMPLE.format(id="a").replace("target:", "t:"))
        _write(tmp_path, "b.yaml", "- broken\n")
        loader, observer = _make_loader()

        with pytest.raises(DatasetValidationError) as exc_info:
            loader.load(config=DatasetConfig(path=tmp_path))

        assert exc_info.value.file == tmp_path / "a.yaml"
        assert len(observer.loading_failed) == 1


class TestFieldMapping:
    def test_custom_keys_are_read(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "s1.yaml",
            "id: s1\n"
            "tool: {factory_name: scatter, display: make_plot}\n"
            "input: {question: Describe it., before: x = 1, after: del x}\n"
            "target: ok\n",
        )
        loader, _ = _make_loader()
        fields = FieldMapping(
            prompt="question",
            setup="before",
            teardown="after",
            tool_factory="factory_name",
            tool_alias="display",
        )

        result = loader.load(config=DatasetConfig(path=tmp_path, fields=fields))

        sample = result.samples[0]
        assert sample.input.prompt == "Describe it."
        assert sample.input.setup == "x = 1"
        assert sample.input.teardown == "del x"
        assert sample.tool.factory == "scatter"
        assert sample.tool.alias == "make_plot"

    def test_validation_can_be_disabled(self, tmp_path: Path) -> None:
        _write(
            tmp_path,
            "s1.yaml",
            "id: s1\ntool: {name: scatter}\ninput: {prompt: hi}\ntarget: ok\n",
        )
        loader, _ = _make_loader()

        result = loader.load(
            config=DatasetConfig.model_validate({"path": tmp_path, "validate": False})
        )

        assert result.samples[0].input.setup == ""
