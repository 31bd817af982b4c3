"""Chat model configuration."""

from pydantic import BaseModel, Field


class ChatConfig(BaseModel, frozen=True):
    type: str = Field(min_length=1)
    model: str = Field(min_length=1)
    temperature: float | None = Field(default=None, ge=0.0)
    max_tool_rounds: int = Field(default=10, ge=1)
