"""ExecutionContext — the isolated namespace one sample's code runs in."""

from collections.abc import Iterator
from types import TracebackType
from typing import Any, Self

from tool_eval.execution.domain.errors import ExecutionContextClosedError


class ExecutionContext:
    """A disposable key-value arena owned by exactly one sample solve.

    Setup code writes into it, the sample's tool reads and writes it during the
    conversation, and teardown code reads it. Closing clears every binding;
    any access after that raises ExecutionContextClosedError.

    Use as a context manager so the namespace is released deterministically::

        with ExecutionContext(sample_id="s1") as context:
            runner.run(code=sample.input.setup, context=context, phase="setup")
    """

    def __init__(self, sample_id: str) -> None:
        self.sample_id = sample_id
        self._namespace: dict[str, Any] = {"__name__": f"tool_eval.sample.{sample_id}"}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def namespace(self) -> dict[str, Any]:
        """The live globals dict handed to exec() for this sample."""
        self._check_open()
        return self._namespace

    def get(self, key: str, default: Any = None) -> Any:
        return self.namespace.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.namespace[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.namespace[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.namespace

    def keys(self) -> list[str]:
        """User-visible bindings, excluding dunder entries such as __builtins__."""
        return [key for key in self.namespace if not key.startswith("__")]

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def close(self) -> None:
        self._namespace.clear()
        self._closed = True

    def __enter__(self) -> Self:
        self._check_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise ExecutionContextClosedError(sample_id=self.sample_id)
