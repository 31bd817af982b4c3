"""LiteLLMChat — Chat implementation running a tool-calling loop over litellm."""

import json
import time
from typing import Any, Self

import litellm

from tool_eval.chat.domain.observer import ChatObserver
from tool_eval.chat.domain.transcript import ToolCall, Transcript, Turn
from tool_eval.chat.domain.usage import UsageMetrics
from tool_eval.chat.infrastructure.errors import ChatInvocationError
from tool_eval.config.domain.chat import ChatConfig
from tool_eval.tools.domain.tool import Tool

litellm.suppress_debug_info = True

# Provider errors worth another attempt.
RETRIABLE_LITELLM_ERRORS: tuple[type[Exception], ...] = (
    litellm.RateLimitError,
    litellm.Timeout,
    litellm.APIConnectionError,
    litellm.InternalServerError,
    litellm.ServiceUnavailableError,
)


class LiteLLMChat:
    """Chat backed by any litellm-supported provider with function calling.

    send() loops: call the model, execute every requested tool call against the
    registered tools, feed the results back as role="tool" messages, and stop
    when the model answers without tool calls. More than max_tool_rounds rounds
    of tool calls is an invocation error.
    """

    def __init__(self, config: ChatConfig, observer: ChatObserver) -> None:
        self._config = config
        self._observer = observer
        self._system_prompt: str | None = None
        self._tools: dict[str, Tool] = {}

    @property
    def model(self) -> str:
        return self._config.model

    def clone(self) -> Self:
        clone = type(self)(config=self._config, observer=self._observer)
        clone._system_prompt = self._system_prompt
        clone._tools = dict(self._tools)
        return clone

    def set_system_prompt(self, text: str) -> None:
        self._system_prompt = text

    def register_tool(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    async def send(self, prompt: str) -> Transcript:
        """
        Run prompt through the tool-calling loop and return the transcript.

        Raises:
            ChatInvocationError: if a completion call fails or the model keeps
                calling tools past max_tool_rounds.
        """
        self._observer.chat_send_started(
            model=self._config.model, tool_names=list(self._tools)
        )
        start = time.monotonic()
        try:
            transcript = await self._run_loop(prompt=prompt)
        except ChatInvocationError as exc:
            reason = str(exc).removeprefix("Failed to invoke chat model: ")
            self._observer.chat_send_failed(model=self._config.model, reason=reason)
            raise

        self._observer.chat_send_completed(
            model=self._config.model,
            duration_ms=int((time.monotonic() - start) * 1000),
            num_turns=len(transcript.turns),
            num_tool_calls=len(transcript.tool_calls()),
        )
        return transcript

    async def _run_loop(self, prompt: str) -> Transcript:
        messages: list[dict[str, Any]] = []
        if self._system_prompt:
            messages.append({"role": "system", "content": self._system_prompt})
        messages.append({"role": "user", "content": prompt})

        turns: list[Turn] = [Turn(turn_idx=0, role="user", text=prompt)]
        usage: UsageMetrics | None = None
        tool_rounds = 0

        while True:
            response = await self._complete(messages=messages)
            usage = _add_usage(usage=usage, response=response)
            message = response.choices[0].message
            requested = getattr(message, "tool_calls", None) or []

            if message.content:
                turns.append(
                    Turn(turn_idx=len(turns), role="assistant", text=message.content)
                )

            if not requested:
                return Transcript(turns=turns, usage=usage)

            tool_rounds += 1
            if tool_rounds > self._config.max_tool_rounds:
                raise ChatInvocationError(
                    reason=f"model exceeded max_tool_rounds={self._config.max_tool_rounds}"
                )

            messages.append(
                {
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.function.name,
                                "arguments": call.function.arguments,
                            },
                        }
                        for call in requested
                    ],
                }
            )

            resolved = [self._call_tool(requested_call=call) for call in requested]
            for call in resolved:
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": call.tool_call_id,
                        "name": call.tool_name,
                        "content": call.result if call.succeeded else call.error,
                    }
                )
            turns.append(
                Turn(turn_idx=len(turns), role="tool_result", tool_calls=resolved)
            )

    async def _complete(self, messages: list[dict[str, Any]]) -> Any:
        kwargs: dict[str, Any] = {"model": self._config.model, "messages": messages}
        if self._tools:
            kwargs["tools"] = [_tool_schema(tool) for tool in self._tools.values()]
        if self._config.temperature is not None:
            kwargs["temperature"] = self._config.temperature

        try:
            return await litellm.acompletion(**kwargs)
        except Exception as exc:
            raise ChatInvocationError(
                reason=str(exc),
                retriable=isinstance(exc, RETRIABLE_LITELLM_ERRORS),
            ) from exc

    def _call_tool(self, requested_call: Any) -> ToolCall:
        name = requested_call.function.name
        raw_arguments = requested_call.function.arguments or "{}"

        try:
            arguments = json.loads(raw_arguments)
        except json.JSONDecodeError as exc:
            return self._record(
                ToolCall(
                    tool_call_id=requested_call.id,
                    tool_name=name,
                    error=f"arguments are not valid JSON: {exc}",
                )
            )

        tool = self._tools.get(name)
        if tool is None:
            return self._record(
                ToolCall(
                    tool_call_id=requested_call.id,
                    tool_name=name,
                    arguments=arguments if isinstance(arguments, dict) else {},
                    error=f"unknown tool '{name}'",
                )
            )
        if not isinstance(arguments, dict):
            return self._record(
                ToolCall(
                    tool_call_id=requested_call.id,
                    tool_name=name,
                    error="arguments must be a JSON object",
                )
            )

        start = time.monotonic()
        result = tool.invoke(arguments)
        duration_ms = (time.monotonic() - start) * 1000.0
        return self._record(
            ToolCall(
                tool_call_id=requested_call.id,
                tool_name=name,
                arguments=arguments,
                result=result.output if result.succeeded else None,
                error=result.error,
                duration_ms=duration_ms,
            )
        )

    def _record(self, call: ToolCall) -> ToolCall:
        self._observer.chat_tool_called(
            model=self._config.model,
            tool_name=call.tool_name,
            succeeded=call.succeeded,
            duration_ms=call.duration_ms,
        )
        return call


def _tool_schema(tool: Tool) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameters,
        },
    }


def _add_usage(usage: UsageMetrics | None, response: Any) -> UsageMetrics | None:
    raw = getattr(response, "usage", None)
    if raw is None:
        return usage
    current = UsageMetrics(
        input_tokens=getattr(raw, "prompt_tokens", None),
        output_tokens=getattr(raw, "completion_tokens", None),
    )
    return current if usage is None else usage + current
