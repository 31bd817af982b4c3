"""Tests for ToolRegistry — registration, alias handling, and module loading."""

from pathlib import Path

import pytest

from tests.tools.fake_observer import (
    AliasIgnoredEvent,
    FakeToolObserver,
    ToolResolvedEvent,
)
from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.tools.domain.tool import Tool
from tool_eval.tools.infrastructure.errors import (
    DuplicateToolFactoryError,
    ToolModuleLoadError,
    ToolResolutionError,
)
from tool_eval.tools.infrastructure.registry import ToolRegistry, make_tool_factory

FIXTURE_MODULE = Path(__file__).parents[2] / "fixtures" / "tools" / "echo_tools.py"


def _echo(context: ExecutionContext, text: str) -> str:
    return f"{context.sample_id}: {text}"


def _make_registry() -> tuple[ToolRegistry, FakeToolObserver]:
    observer = FakeToolObserver()
    registry = ToolRegistry(observer=observer)
    registry.register(
        factory_name="echo",
        factory=make_tool_factory(
            executor=_echo,
            default_name="echo",
            description="Echo.",
            parameters={"type": "object", "properties": {}},
        ),
    )
    registry.register(
        factory_name="fixed",
        factory=make_tool_factory(
            executor=_echo,
            default_name="shout",
            description="Fixed.",
            parameters={"type": "object", "properties": {}},
        ),
        default_name="shout",
        supports_alias=False,
    )
    return registry, observer


class TestRegister:
    def test_names_are_sorted(self) -> None:
        registry, _ = _make_registry()

        assert registry.names() == ["echo", "fixed"]
        assert "echo" in registry
        assert "other" not in registry

    def test_duplicate_name_raises(self) -> None:
        registry, _ = _make_registry()

        with pytest.raises(DuplicateToolFactoryError, match="echo"):
            registry.register(
                factory_name="echo",
                factory=lambda context, display_name: Tool(
                    name="x", description="", func=lambda: None
                ),
            )


class TestDisplayName:
    def test_alias_honoured_when_supported(self) -> None:
        registry, _ = _make_registry()

        assert registry.display_name("echo", alias="make_plot") == "make_plot"
        assert registry.display_name("echo") == "echo"

    def test_alias_ignored_when_unsupported(self) -> None:
        registry, _ = _make_registry()

        assert registry.display_name("fixed", alias="make_plot") == "shout"

    def test_unknown_factory_falls_back_to_alias_or_name(self) -> None:
        registry, _ = _make_registry()

        assert registry.display_name("missing", alias="a") == "a"
        assert registry.display_name("missing") == "missing"


class TestResolve:
    def test_resolved_tool_is_bound_to_context(self) -> None:
        registry, observer = _make_registry()
        context = ExecutionContext(sample_id="s1")

        tool = registry.resolve("echo", context=context)

        assert tool.name == "echo"
        assert tool.invoke({"text": "hi"}).output == "s1: hi"
        assert observer.resolved == [
            ToolResolvedEvent(sample_id="s1", factory_name="echo", display_name="echo")
        ]

    def test_alias_becomes_display_name(self) -> None:
        registry, observer = _make_registry()

        tool = registry.resolve(
            "echo", context=ExecutionContext(sample_id="s1"), alias="make_plot"
        )

        assert tool.name == "make_plot"
        assert observer.aliases_ignored == []

    def test_unsupported_alias_is_dropped_with_warning(self) -> None:
        registry, observer = _make_registry()

        tool = registry.resolve(
            "fixed", context=ExecutionContext(sample_id="s1"), alias="make_plot"
        )

        assert tool.name == "shout"
        assert observer.aliases_ignored == [
            AliasIgnoredEvent(
                sample_id="s1",
                factory_name="fixed",
                alias="make_plot",
                display_name="shout",
            )
        ]

    def test_each_resolve_builds_a_fresh_tool(self) -> None:
        registry, _ = _make_registry()

        first = registry.resolve("echo", context=ExecutionContext(sample_id="a"))
        second = registry.resolve("echo", context=ExecutionContext(sample_id="b"))

        assert first is not second
        assert second.invoke({"text": "x"}).output == "b: x"

    def test_unknown_factory_raises(self) -> None:
        registry, observer = _make_registry()

        with pytest.raises(ToolResolutionError, match="no factory registered"):
            registry.resolve("missing", context=ExecutionContext(sample_id="s1"))

        assert observer.resolved == []

    def test_failing_factory_raises_resolution_error(self) -> None:
        observer = FakeToolObserver()
        registry = ToolRegistry(observer=observer)

        def broken(context: ExecutionContext, display_name: str | None) -> Tool:
            raise KeyError("xs")

        registry.register(factory_name="broken", factory=broken)

        with pytest.raises(ToolResolutionError, match="factory raised KeyError"):
            registry.resolve("broken", context=ExecutionContext(sample_id="s1"))


class TestLoadModule:
    def test_registers_factories_from_hook(self) -> None:
        observer = FakeToolObserver()
        registry = ToolRegistry(observer=observer)

        registry.load_module(FIXTURE_MODULE)

        assert registry.names() == ["echo", "fixed_echo"]
        assert len(observer.modules_loaded) == 1
        assert observer.modules_loaded[0].factory_count == 2

    def test_loading_same_path_twice_is_noop(self) -> None:
        observer = FakeToolObserver()
        registry = ToolRegistry(observer=observer)

        registry.load_module(FIXTURE_MODULE)
        registry.load_module(FIXTURE_MODULE.parent / ".." / "tools" / "echo_tools.py")

        assert registry.names() == ["echo", "fixed_echo"]
        assert len(observer.modules_loaded) == 1

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        registry = ToolRegistry(observer=FakeToolObserver())

        with pytest.raises(ToolModuleLoadError):
            registry.load_module(tmp_path / "absent.py")

    def test_module_without_hook_raises(self, tmp_path: Path) -> None:
        module = tmp_path / "no_hook.py"
        module.write_text("VALUE = 1\n")
        registry = ToolRegistry(observer=FakeToolObserver())

        with pytest.raises(ToolModuleLoadError, match="register_tools"):
            registry.load_module(module)

    def test_module_import_error_raises(self, tmp_path: Path) -> None:
        module = tmp_path / "broken.py"
        module.write_text("raise RuntimeError('bad module')\n")
        registry = ToolRegistry(observer=FakeToolObserver())

        with pytest.raises(ToolModuleLoadError, match="RuntimeError: bad module"):
            registry.load_module(module)

    def test_hook_error_raises(self, tmp_path: Path) -> None:
        module = tmp_path / "bad_hook.py"
        module.write_text("def register_tools(registry):\n    raise ValueError('nope')\n")
        registry = ToolRegistry(observer=FakeToolObserver())

        with pytest.raises(ToolModuleLoadError, match="ValueError: nope"):
            registry.load_module(module)
