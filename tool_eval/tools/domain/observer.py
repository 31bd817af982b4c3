"""ToolObserver port — domain events emitted while loading and resolving tools."""

from typing import Protocol


class ToolObserver(Protocol):
    def tool_module_loaded(self, path: str, factory_count: int) -> None: ...

    def tool_resolved(
        self, sample_id: str, factory_name: str, display_name: str
    ) -> None: ...

    def tool_alias_ignored(
        self, sample_id: str, factory_name: str, alias: str, display_name: str
    ) -> None: ...
