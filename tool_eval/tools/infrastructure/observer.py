"""Structlog implementation of the ToolObserver port."""

import structlog


class StructlogToolObserver:
    """Delegates tool domain events to structlog.

    Satisfies the ToolObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def tool_module_loaded(self, path: str, factory_count: int) -> None:
        self._log.info("tool.module_loaded", path=path, factory_count=factory_count)

    def tool_resolved(
        self, sample_id: str, factory_name: str, display_name: str
    ) -> None:
        self._log.debug(
            "tool.resolved",
            sample_id=sample_id,
            factory_name=factory_name,
            display_name=display_name,
        )

    def tool_alias_ignored(
        self, sample_id: str, factory_name: str, alias: str, display_name: str
    ) -> None:
        self._log.warning(
            "tool.alias_ignored",
            sample_id=sample_id,
            factory_name=factory_name,
            alias=alias,
            display_name=display_name,
        )
