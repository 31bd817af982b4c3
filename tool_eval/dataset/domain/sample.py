"""Sample domain value objects — one tool-use evaluation case."""

from typing import TypeAlias

from pydantic import BaseModel, Field, field_validator

MetadataValue: TypeAlias = str | int | float | bool | None

# Result columns; metadata keys may not shadow them.
RESERVED_METADATA_KEYS = frozenset(
    {
        "model",
        "id",
        "epoch",
        "score",
        "score_rank",
        "sample_type",
        "judge_prompt",
        "judge_response",
        "tool_called",
        "error",
    }
)


class ToolSpec(BaseModel, frozen=True):
    """Reference to a registered tool factory, with an optional display-name alias."""

    factory: str = Field(min_length=1)
    alias: str | None = None


class SampleInput(BaseModel, frozen=True):
    """The prompt sent to the model plus the code run around the conversation."""

    prompt: str
    setup: str = ""
    teardown: str = ""


class Sample(BaseModel, frozen=True):
    """Immutable value object representing a single evaluation case."""

    id: str = Field(min_length=1)
    type: str | None = None
    tool: ToolSpec
    input: SampleInput
    target: str
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)

    @field_validator("metadata")
    @classmethod
    def metadata_keys_not_reserved(
        cls, metadata: dict[str, MetadataValue]
    ) -> dict[str, MetadataValue]:
        clashes = sorted(RESERVED_METADATA_KEYS.intersection(metadata))
        if clashes:
            raise ValueError(f"reserved metadata keys: {clashes}")
        return metadata
