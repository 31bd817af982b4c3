"""ClaudeAgentSDKChat — Chat implementation using the Claude Agent SDK."""

import time
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Self

from claude_agent_sdk import SdkMcpTool, create_sdk_mcp_server, query
from claude_agent_sdk import tool as sdk_tool
from claude_agent_sdk._errors import ClaudeSDKError
from claude_agent_sdk.types import (
    AssistantMessage,
    ClaudeAgentOptions,
    McpSdkServerConfig,
    ResultMessage,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

from tool_eval.chat.domain.observer import ChatObserver
from tool_eval.chat.domain.transcript import ToolCall, Transcript, Turn
from tool_eval.chat.domain.usage import UsageMetrics
from tool_eval.chat.infrastructure.errors import ChatInvocationError
from tool_eval.config.domain.chat import ChatConfig
from tool_eval.tools.domain.tool import Tool

SERVER_NAME = "tool_eval"
_TOOL_PREFIX = f"mcp__{SERVER_NAME}__"

# Claude built-in tools. allowed_tools alone does not remove them from the
# model's context, so they are disallowed explicitly.
_BUILTIN_TOOLS = [
    "Bash",
    "Edit",
    "Glob",
    "Grep",
    "LS",
    "MultiEdit",
    "NotebookEdit",
    "NotebookRead",
    "Read",
    "Task",
    "TodoRead",
    "TodoWrite",
    "WebFetch",
    "WebSearch",
    "Write",
]


@dataclass(frozen=True)
class _PendingToolCall:
    tool_call: ToolCall
    start_time: float


class ClaudeAgentSDKChat:
    """Chat that runs one SDK session per send().

    Registered tools are exposed through an in-process SDK MCP server, so the
    model sees them as ``mcp__tool_eval__<name>``. The prefix is stripped when
    building the transcript; tool names in the transcript are display names.
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
        """Run one SDK session for prompt and return the structured transcript.

        Raises:
            ChatInvocationError: if the SDK raises, the session ends in an
                error, or no ResultMessage is present in the response stream.
        """
        self._observer.chat_send_started(
            model=self._config.model, tool_names=list(self._tools)
        )

        try:
            options = ClaudeAgentOptions(
                model=self._config.model,
                system_prompt=self._system_prompt,
                mcp_servers=self._build_mcp_servers(),
                allowed_tools=[f"{_TOOL_PREFIX}{name}" for name in self._tools],
                disallowed_tools=list(_BUILTIN_TOOLS),
                permission_mode="bypassPermissions",
                setting_sources=[],
                max_turns=self._config.max_tool_rounds + 1,
            )
            result_message, turns = await self._collect_result(
                prompt=prompt, options=options
            )
        except ChatInvocationError as exc:
            reason = str(exc).removeprefix("Failed to invoke chat model: ")
            self._observer.chat_send_failed(model=self._config.model, reason=reason)
            raise

        transcript = Transcript(turns=turns, usage=_map_usage(raw=result_message.usage))
        self._observer.chat_send_completed(
            model=self._config.model,
            duration_ms=result_message.duration_ms,
            num_turns=len(transcript.turns),
            num_tool_calls=len(transcript.tool_calls()),
        )
        return transcript

    async def _collect_result(
        self, prompt: str, options: ClaudeAgentOptions
    ) -> tuple[ResultMessage, list[Turn]]:
        """Run the SDK query, extract the single ResultMessage, and collect turns.

        Tool-use blocks are held as pending until a matching ToolResultBlock
        arrives in a later UserMessage. Tool calls that are never resolved are
        appended at the end as failed calls.

        Raises:
            ChatInvocationError: on SDK errors or a missing/error ResultMessage.
        """
        result_message: ResultMessage | None = None
        turns: list[Turn] = [Turn(turn_idx=0, role="user", text=prompt)]
        pending_tool_calls: dict[str, _PendingToolCall] = {}

        try:
            async for message in query(prompt=_prompt_stream(prompt), options=options):
                if isinstance(message, ResultMessage):
                    result_message = message
                elif isinstance(message, AssistantMessage):
                    text_parts: list[str] = []
                    for block in message.content:
                        if isinstance(block, TextBlock):
                            text_parts.append(block.text)
                        elif isinstance(block, ToolUseBlock):
                            pending_tool_calls[block.id] = _PendingToolCall(
                                tool_call=ToolCall(
                                    tool_call_id=block.id,
                                    tool_name=_display_name(block.name),
                                    arguments=block.input,
                                ),
                                start_time=time.monotonic(),
                            )

                    if text_parts:
                        turns.append(
                            Turn(
                                turn_idx=len(turns),
                                role="assistant",
                                text="".join(text_parts),
                            )
                        )

                elif isinstance(message, UserMessage):
                    # content is a plain str unless it carries tool results.
                    if not isinstance(message.content, list):
                        continue

                    resolved: list[ToolCall] = []
                    for block in message.content:
                        if not isinstance(block, ToolResultBlock):
                            continue
                        pending = pending_tool_calls.pop(block.tool_use_id, None)
                        if pending is None:
                            continue
                        resolved.append(self._resolve(pending=pending, block=block))

                    if resolved:
                        turns.append(
                            Turn(
                                turn_idx=len(turns),
                                role="tool_result",
                                tool_calls=resolved,
                            )
                        )

        except ClaudeSDKError as exc:
            raise ChatInvocationError(reason=str(exc), retriable=True) from exc
        except Exception as exc:
            # The SDK raises a bare Exception when its message reader hits a
            # fatal error such as the subprocess exiting.
            raise ChatInvocationError(reason=str(exc), retriable=True) from exc

        if pending_tool_calls:
            turns.append(
                Turn(
                    turn_idx=len(turns),
                    role="tool_result",
                    tool_calls=[
                        p.tool_call.model_copy(update={"error": "no tool result received"})
                        for p in pending_tool_calls.values()
                    ],
                )
            )

        if result_message is None:
            raise ChatInvocationError(reason="no ResultMessage in response stream")

        if result_message.is_error:
            raise ChatInvocationError(
                reason=f"model returned error response: {result_message.result}"
            )

        has_reply = any(turn.role == "assistant" for turn in turns)
        if not has_reply and result_message.result:
            turns.append(
                Turn(turn_idx=len(turns), role="assistant", text=result_message.result)
            )

        return result_message, turns

    def _resolve(self, pending: _PendingToolCall, block: ToolResultBlock) -> ToolCall:
        duration_ms = (time.monotonic() - pending.start_time) * 1000.0
        text = _result_text(block.content)
        call = pending.tool_call.model_copy(
            update={
                "result": None if block.is_error else text,
                "error": (text or "tool reported an error") if block.is_error else None,
                "duration_ms": duration_ms,
            }
        )
        self._observer.chat_tool_called(
            model=self._config.model,
            tool_name=call.tool_name,
            succeeded=call.succeeded,
            duration_ms=call.duration_ms,
        )
        return call

    def _build_mcp_servers(self) -> dict[str, McpSdkServerConfig]:
        if not self._tools:
            return {}
        server = create_sdk_mcp_server(
            name=SERVER_NAME,
            version="1.0.0",
            tools=[_as_sdk_tool(tool) for tool in self._tools.values()],
        )
        return {SERVER_NAME: server}


def _as_sdk_tool(tool: Tool) -> SdkMcpTool[Any]:
    async def handler(args: dict[str, Any]) -> dict[str, Any]:
        result = tool.invoke(args)
        text = result.output if result.succeeded else result.error
        return {
            "content": [{"type": "text", "text": text or ""}],
            "is_error": not result.succeeded,
        }

    return sdk_tool(tool.name, tool.description, tool.parameters)(handler)


async def _prompt_stream(prompt: str) -> AsyncIterator[dict[str, Any]]:
    # SDK MCP servers require streaming input mode.
    yield {
        "type": "user",
        "message": {"role": "user", "content": prompt},
        "parent_tool_use_id": None,
        "session_id": "default",
    }


def _display_name(sdk_name: str) -> str:
    return sdk_name.removeprefix(_TOOL_PREFIX)


def _result_text(content: Any) -> str | None:
    """ToolResultBlock content may be a str, a list of content dicts, or None."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return " ".join(
            str(item.get("text", "")) for item in content if isinstance(item, dict)
        )
    return None


def _map_usage(raw: dict[str, Any] | None) -> UsageMetrics | None:
    if raw is None:
        return None
    return UsageMetrics(
        input_tokens=raw.get("input_tokens"),
        output_tokens=raw.get("output_tokens"),
    )
