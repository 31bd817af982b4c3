"""Tests for LiteLLMChat — the tool-calling loop over litellm.acompletion."""

import json
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, patch

import litellm
import pytest

from tests.chat.fake_observer import FakeChatObserver
from tool_eval.chat.infrastructure.errors import ChatInvocationError
from tool_eval.chat.infrastructure.litellm_chat import LiteLLMChat
from tool_eval.config.domain.chat import ChatConfig
from tool_eval.tools.domain.tool import Tool

_ACOMPLETION = "tool_eval.chat.infrastructure.litellm_chat.litellm.acompletion"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_chat(
    max_tool_rounds: int = 10,
    temperature: float | None = None,
    observer: FakeChatObserver | None = None,
) -> LiteLLMChat:
    return LiteLLMChat(
        config=ChatConfig(
            type="litellm",
            model="openai/gpt-4o",
            temperature=temperature,
            max_tool_rounds=max_tool_rounds,
        ),
        observer=observer if observer is not None else FakeChatObserver(),
    )


def _make_tool(name: str = "create_plot") -> Tool:
    return Tool(
        name=name,
        description="Plot two variables.",
        func=lambda x, y: f"plotted {x} vs {y}",
        parameters={
            "type": "object",
            "properties": {"x": {"type": "string"}, "y": {"type": "string"}},
        },
    )


def _tool_call(
    call_id: str = "call_1", name: str = "create_plot", arguments: Any = None
) -> SimpleNamespace:
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments or {})
    return SimpleNamespace(
        id=call_id, function=SimpleNamespace(name=name, arguments=raw)
    )


def _response(
    content: str | None = None,
    tool_calls: list[SimpleNamespace] | None = None,
    prompt_tokens: int = 10,
    completion_tokens: int = 5,
) -> SimpleNamespace:
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=message)],
        usage=SimpleNamespace(
            prompt_tokens=prompt_tokens, completion_tokens=completion_tokens
        ),
    )


# ---------------------------------------------------------------------------
# send() — plain replies
# ---------------------------------------------------------------------------


class TestSendWithoutTools:
    async def test_returns_user_and_assistant_turns(self) -> None:
        chat = _make_chat()

        with patch(_ACOMPLETION, new=AsyncMock(return_value=_response("Hi."))):
            transcript = await chat.send("Hello")

        assert [t.role for t in transcript.turns] == ["user", "assistant"]
        assert transcript.last_text() == "Hi."
        assert transcript.usage is not None
        assert transcript.usage.input_tokens == 10

    async def test_system_prompt_is_first_message(self) -> None:
        chat = _make_chat()
        chat.set_system_prompt("Be brief.")
        mock = AsyncMock(return_value=_response("Hi."))

        with patch(_ACOMPLETION, new=mock):
            await chat.send("Hello")

        messages = mock.call_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "Be brief."}
        assert messages[1] == {"role": "user", "content": "Hello"}

    async def test_no_tools_kwarg_without_registered_tools(self) -> None:
        mock = AsyncMock(return_value=_response("Hi."))

        with patch(_ACOMPLETION, new=mock):
            await _make_chat().send("Hello")

        assert "tools" not in mock.call_args.kwargs
        assert "temperature" not in mock.call_args.kwargs

    async def test_temperature_passed_when_configured(self) -> None:
        mock = AsyncMock(return_value=_response("Hi."))

        with patch(_ACOMPLETION, new=mock):
            await _make_chat(temperature=0.2).send("Hello")

        assert mock.call_args.kwargs["temperature"] == pytest.approx(0.2)

    async def test_emits_started_and_completed(self) -> None:
        observer = FakeChatObserver()
        chat = _make_chat(observer=observer)
        chat.register_tool(_make_tool())

        with patch(_ACOMPLETION, new=AsyncMock(return_value=_response("Hi."))):
            await chat.send("Hello")

        assert observer.send_started[0].tool_names == ["create_plot"]
        assert observer.send_completed[0].num_turns == 2
        assert observer.send_completed[0].num_tool_calls == 0


# ---------------------------------------------------------------------------
# send() — tool-calling loop
# ---------------------------------------------------------------------------


class TestToolLoop:
    async def test_executes_tool_and_feeds_result_back(self) -> None:
        chat = _make_chat()
        chat.register_tool(_make_tool())
        mock = AsyncMock(
            side_effect=[
                _response(tool_calls=[_tool_call(arguments={"x": "a", "y": "b"})]),
                _response("Positive correlation."),
            ]
        )

        with patch(_ACOMPLETION, new=mock):
            transcript = await chat.send("Plot a vs b")

        assert [t.role for t in transcript.turns] == ["user", "tool_result", "assistant"]
        call = transcript.tool_calls()[0]
        assert call.tool_name == "create_plot"
        assert call.arguments == {"x": "a", "y": "b"}
        assert call.result == "plotted a vs b"
        assert transcript.called_tool({"create_plot"}) is True

        second_messages = mock.call_args_list[1].kwargs["messages"]
        assert second_messages[-1] == {
            "role": "tool",
            "tool_call_id": "call_1",
            "name": "create_plot",
            "content": "plotted a vs b",
        }
        assert second_messages[-2]["role"] == "assistant"

    async def test_tool_schema_uses_display_name(self) -> None:
        chat = _make_chat()
        chat.register_tool(_make_tool(name="make_plot"))
        mock = AsyncMock(return_value=_response("Hi."))

        with patch(_ACOMPLETION, new=mock):
            await chat.send("Hello")

        tools = mock.call_args.kwargs["tools"]
        assert tools[0]["function"]["name"] == "make_plot"
        assert tools[0]["function"]["parameters"]["properties"]["x"] == {
            "type": "string"
        }

    async def test_usage_is_summed_across_rounds(self) -> None:
        chat = _make_chat()
        chat.register_tool(_make_tool())
        mock = AsyncMock(
            side_effect=[
                _response(tool_calls=[_tool_call(arguments={"x": "a", "y": "b"})]),
                _response("Done.", prompt_tokens=20, completion_tokens=7),
            ]
        )

        with patch(_ACOMPLETION, new=mock):
            transcript = await chat.send("Plot")

        assert transcript.usage is not None
        assert transcript.usage.input_tokens == 30
        assert transcript.usage.output_tokens == 12

    async def test_failing_tool_is_reported_in_band(self) -> None:
        observer = FakeChatObserver()
        chat = _make_chat(observer=observer)
        chat.register_tool(_make_tool())
        mock = AsyncMock(
            side_effect=[
                _response(tool_calls=[_tool_call(arguments={"x": "a"})]),
                _response("Sorry."),
            ]
        )

        with patch(_ACOMPLETION, new=mock):
            transcript = await chat.send("Plot")

        call = transcript.tool_calls()[0]
        assert call.succeeded is False
        assert "TypeError" in (call.error or "")
        assert transcript.called_tool({"create_plot"}) is False
        assert observer.tool_called[0].succeeded is False
        assert mock.call_args_list[1].kwargs["messages"][-1]["content"] == call.error

    async def test_unknown_tool_is_reported_in_band(self) -> None:
        chat = _make_chat()
        chat.register_tool(_make_tool())
        mock = AsyncMock(
            side_effect=[
                _response(tool_calls=[_tool_call(name="other", arguments={})]),
                _response("Sorry."),
            ]
        )

        with patch(_ACOMPLETION, new=mock):
            transcript = await chat.send("Plot")

        assert transcript.tool_calls()[0].error == "unknown tool 'other'"

    async def test_invalid_json_arguments_are_reported_in_band(self) -> None:
        chat = _make_chat()
        chat.register_tool(_make_tool())
        mock = AsyncMock(
            side_effect=[
                _response(tool_calls=[_tool_call(arguments="{not json")]),
                _response("Sorry."),
            ]
        )

        with patch(_ACOMPLETION, new=mock):
            transcript = await chat.send("Plot")

        assert "not valid JSON" in (transcript.tool_calls()[0].error or "")

    async def test_exceeding_max_tool_rounds_raises(self) -> None:
        observer = FakeChatObserver()
        chat = _make_chat(max_tool_rounds=2, observer=observer)
        chat.register_tool(_make_tool())
        looping = _response(tool_calls=[_tool_call(arguments={"x": "a", "y": "b"})])

        with patch(_ACOMPLETION, new=AsyncMock(return_value=looping)):
            with pytest.raises(ChatInvocationError, match="max_tool_rounds=2"):
                await chat.send("Plot")

        assert len(observer.send_failed) == 1


# ---------------------------------------------------------------------------
# send() — invocation failures
# ---------------------------------------------------------------------------


class TestSendFailure:
    async def test_provider_error_raises_chat_invocation_error(self) -> None:
        observer = FakeChatObserver()
        chat = _make_chat(observer=observer)

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(ChatInvocationError) as exc_info:
                await chat.send("Hello")

        assert exc_info.value.retriable is False
        assert observer.send_failed[0].reason == "boom"
        assert observer.send_completed == []

    async def test_rate_limit_is_retriable(self) -> None:
        error = litellm.RateLimitError(
            message="slow down", llm_provider="openai", model="gpt-4o"
        )

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=error)):
            with pytest.raises(ChatInvocationError) as exc_info:
                await _make_chat().send("Hello")

        assert exc_info.value.retriable is True


# ---------------------------------------------------------------------------
# clone()
# ---------------------------------------------------------------------------


class TestClone:
    def test_clone_copies_prompt_and_tools(self) -> None:
        chat = _make_chat()
        chat.set_system_prompt("Be brief.")
        chat.register_tool(_make_tool())

        clone = chat.clone()
        clone.register_tool(_make_tool(name="extra"))

        assert clone.model == chat.model
        assert clone._system_prompt == "Be brief."
        assert set(clone._tools) == {"create_plot", "extra"}
        assert set(chat._tools) == {"create_plot"}
