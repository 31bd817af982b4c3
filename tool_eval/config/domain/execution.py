"""Execution configuration models."""

from typing import Literal

from pydantic import BaseModel, Field


class RetryConfig(BaseModel, frozen=True):
    max_attempts: int = Field(default=3, ge=1)
    initial_backoff_seconds: float = Field(default=1.0, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1)


class ExecutionConfig(BaseModel, frozen=True):
    epochs: int = Field(default=1, ge=1)
    on_sample_error: Literal["abort", "contain"] = "abort"
    isolate_model_failures: bool = False
    parallel_models: bool = False
