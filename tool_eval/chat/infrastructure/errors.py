"""Error types raised by chat infrastructure."""

from tool_eval.core.errors import ToolEvalError


class ChatInvocationError(ToolEvalError):
    """Raised when the model cannot be invoked or returns an error response."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to invoke chat model: {reason}", retriable=retriable)


class ChatTypeNotSupportedError(ToolEvalError):
    """Raised when the chat type specified in config is not a known backend."""

    def __init__(self, chat_type: str) -> None:
        super().__init__(
            f"Failed to create chat: unsupported chat type '{chat_type}'"
        )
