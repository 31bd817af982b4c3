"""Top-level EvalConfig aggregate — the root configuration object."""

from typing import TypeAlias

from pydantic import BaseModel, Field

from tool_eval.config.domain.chat import ChatConfig
from tool_eval.config.domain.dataset import DatasetConfig
from tool_eval.config.domain.execution import ExecutionConfig
from tool_eval.config.domain.judge import JudgeConfig
from tool_eval.config.domain.solver import SolverConfig
from tool_eval.config.domain.tools import ToolsConfig

ModelName: TypeAlias = str


class EvalConfig(BaseModel, frozen=True):
    """Root configuration aggregate for a tool-eval evaluation run."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    dataset: DatasetConfig
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    models: dict[ModelName, ChatConfig] = Field(min_length=1)
    judge: JudgeConfig
    solver: SolverConfig = Field(default_factory=SolverConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
