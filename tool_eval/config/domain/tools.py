"""Tool configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field


class ToolsConfig(BaseModel, frozen=True):
    """Tool factory modules to load and the tool names the scorer accepts.

    When accepted_names is None the names are derived from the dataset: each
    sample's alias, or the registered default name of its factory.
    """

    modules: list[Path] = Field(default_factory=list)
    accepted_names: list[str] | None = None
