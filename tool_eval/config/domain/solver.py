"""Solver configuration model."""

from pydantic import BaseModel, Field


class SolverConfig(BaseModel, frozen=True):
    system_prompt: str | None = None
    # Pause between consecutive samples; none after the last.
    sleep_seconds: float = Field(default=15.0, ge=0.0)
