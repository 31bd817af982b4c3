"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tool_eval.config.domain.config import EvalConfig
from tool_eval.config.domain.observer import ConfigObserver
from tool_eval.config.infrastructure.env_interpolation import (
    find_unset_variables,
    substitute,
)
from tool_eval.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns an EvalConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> EvalConfig:
        """
        Load, interpolate, validate, and return an EvalConfig from a YAML file.

        Raises:
            ConfigLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the document violates the config schema or
                the accepted tool names are not a subset of a non-empty list.
        """
        raw = _parse_yaml(path=path)
        missing = find_unset_variables(raw)
        if missing:
            raise MissingEnvVarsError(missing)
        cfg = _build_config(interpolated=substitute(raw))
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(name=cfg.name, version=cfg.version)
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc

    if not isinstance(raw, dict):
        raise ConfigLoadError(path=path, reason="top-level document is not a mapping")
    return raw


def _build_config(interpolated: Any) -> EvalConfig:
    try:
        cfg = EvalConfig.model_validate(interpolated)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc

    accepted = cfg.tools.accepted_names
    if accepted is not None and not accepted:
        raise ConfigValidationError(
            "tools.accepted_names must list at least one name when set"
        )
    return cfg


def _emit_warnings(cfg: EvalConfig, observer: ConfigObserver) -> None:
    if cfg.judge.temperature > 0.0:
        observer.config_judge_temperature_warning(cfg.judge.temperature)
