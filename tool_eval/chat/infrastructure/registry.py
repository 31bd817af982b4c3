"""create_chat — maps ChatConfig.type to the correct Chat backend."""

from collections.abc import Callable

from tool_eval.chat.domain.chat import Chat
from tool_eval.chat.domain.observer import ChatObserver
from tool_eval.chat.infrastructure.claude_sdk import ClaudeAgentSDKChat
from tool_eval.chat.infrastructure.errors import ChatTypeNotSupportedError
from tool_eval.chat.infrastructure.litellm_chat import LiteLLMChat
from tool_eval.config.domain.chat import ChatConfig

_BACKENDS: dict[str, Callable[[ChatConfig, ChatObserver], Chat]] = {
    "litellm": lambda config, observer: LiteLLMChat(config=config, observer=observer),
    "claude_agent_sdk": lambda config, observer: ClaudeAgentSDKChat(
        config=config, observer=observer
    ),
}


def supported_chat_types() -> list[str]:
    return sorted(_BACKENDS)


def create_chat(config: ChatConfig, observer: ChatObserver) -> Chat:
    """Return the Chat backend for the given ChatConfig.

    Raises:
        ChatTypeNotSupportedError: if config.type is not a known chat type.
    """
    backend = _BACKENDS.get(config.type)
    if backend is None:
        raise ChatTypeNotSupportedError(chat_type=config.type)
    return backend(config, observer)
