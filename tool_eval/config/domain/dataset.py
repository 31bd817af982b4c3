"""Dataset configuration models."""

from pathlib import Path
from typing import Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

InputField: TypeAlias = Literal["prompt", "setup", "teardown"]


class FieldMapping(BaseModel, frozen=True):
    """Maps logical sample fields to the keys used in the sample documents.

    prompt/setup/teardown are looked up under ``input``; tool_factory and
    tool_alias under ``tool``.
    """

    prompt: str = Field(default="prompt", min_length=1)
    setup: str = Field(default="setup", min_length=1)
    teardown: str = Field(default="teardown", min_length=1)
    tool_factory: str = Field(default="name", min_length=1)
    tool_alias: str = Field(default="alias", min_length=1)


class DatasetConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: Path | list[Path]
    required_fields: list[InputField] = Field(
        default_factory=lambda: ["setup", "teardown", "prompt"]
    )
    validate_samples: bool = Field(default=True, alias="validate")
    fields: FieldMapping = Field(default_factory=FieldMapping)
