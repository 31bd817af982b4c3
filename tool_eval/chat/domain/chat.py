"""Chat Protocol — a model handle that can be cloned, given a tool, and sent a prompt."""

from typing import Protocol, Self

from tool_eval.chat.domain.transcript import Transcript
from tool_eval.tools.domain.tool import Tool


class Chat(Protocol):
    """Conversational model handle.

    The configured instance per model is a template: the solver clones it once
    per sample so registered tools and the system prompt never leak between
    samples. Tool calls requested by the model are executed synchronously
    inside send(); a failing tool is reported back to the model, not raised.
    """

    @property
    def model(self) -> str: ...

    def clone(self) -> Self: ...

    def set_system_prompt(self, text: str) -> None: ...

    def register_tool(self, tool: Tool) -> None: ...

    async def send(self, prompt: str) -> Transcript:
        """
        Run one user prompt to completion, including any tool-calling rounds.

        Raises:
            ChatInvocationError: if the model cannot be invoked.
        """
        ...
