"""ToolRegistry — named tool factories, alias handling, and tool module loading."""

import functools
import hashlib
import importlib.util
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias

from tool_eval.core.errors import ToolEvalError
from tool_eval.execution.domain.context import ExecutionContext
from tool_eval.tools.domain.observer import ToolObserver
from tool_eval.tools.domain.tool import JsonSchema, Tool, ToolFactory
from tool_eval.tools.infrastructure.errors import (
    DuplicateToolFactoryError,
    ToolModuleLoadError,
    ToolResolutionError,
)

ToolExecutor: TypeAlias = Callable[..., Any]

_REGISTER_HOOK = "register_tools"


@dataclass(frozen=True)
class _Registration:
    factory: ToolFactory
    default_name: str
    supports_alias: bool


class ToolRegistry:
    """Maps factory names to ToolFactory constructors.

    Factories are registered explicitly, either in code or by a tool module's
    ``register_tools(registry)`` hook. After loading, the registry is only read,
    so one instance can be shared by every model in a run.
    """

    def __init__(self, observer: ToolObserver) -> None:
        self._observer = observer
        self._registrations: dict[str, _Registration] = {}
        self._loaded_modules: set[Path] = set()

    def register(
        self,
        factory_name: str,
        factory: ToolFactory,
        default_name: str | None = None,
        supports_alias: bool = True,
    ) -> None:
        """
        Register a factory under factory_name.

        default_name is the display name used when no alias applies; it
        defaults to factory_name. Factories that cannot rename their tool
        register with supports_alias=False and are always called with None.

        Raises:
            DuplicateToolFactoryError: if factory_name is already registered.
        """
        if factory_name in self._registrations:
            raise DuplicateToolFactoryError(factory_name=factory_name)
        self._registrations[factory_name] = _Registration(
            factory=factory,
            default_name=default_name or factory_name,
            supports_alias=supports_alias,
        )

    def names(self) -> list[str]:
        return sorted(self._registrations)

    def __contains__(self, factory_name: object) -> bool:
        return factory_name in self._registrations

    def display_name(self, factory_name: str, alias: str | None = None) -> str:
        """Name the model will see: the honoured alias, else the default name."""
        registration = self._registrations.get(factory_name)
        if registration is None:
            return alias or factory_name
        if alias and registration.supports_alias:
            return alias
        return registration.default_name

    def resolve(
        self, factory_name: str, context: ExecutionContext, alias: str | None = None
    ) -> Tool:
        """
        Build the tool for one sample, bound to that sample's context.

        An alias on a factory registered with supports_alias=False is dropped
        with a tool.alias_ignored warning rather than failing the sample.

        Raises:
            ToolResolutionError: if factory_name is unknown or the factory raises.
        """
        registration = self._registrations.get(factory_name)
        if registration is None:
            raise ToolResolutionError(factory_name=factory_name)

        display_name = alias if alias and registration.supports_alias else None
        try:
            tool = registration.factory(context, display_name)
        except ToolEvalError:
            raise
        except Exception as exc:
            raise ToolResolutionError(
                factory_name=factory_name,
                reason=f"factory raised {type(exc).__name__}: {exc}",
            ) from exc

        if alias and not registration.supports_alias:
            self._observer.tool_alias_ignored(
                sample_id=context.sample_id,
                factory_name=factory_name,
                alias=alias,
                display_name=tool.name,
            )

        self._observer.tool_resolved(
            sample_id=context.sample_id,
            factory_name=factory_name,
            display_name=tool.name,
        )
        return tool

    def load_module(self, path: Path) -> None:
        """
        Import a tool module and call its register_tools(registry) hook.

        Each resolved path is imported at most once per registry.

        Raises:
            ToolModuleLoadError: if the file cannot be imported, has no
                register_tools() hook, or the hook fails.
            DuplicateToolFactoryError: if the hook registers a taken name.
        """
        resolved = path.resolve()
        if resolved in self._loaded_modules:
            return

        before = len(self._registrations)
        module = _import_file(path=resolved)
        hook = getattr(module, _REGISTER_HOOK, None)
        if not callable(hook):
            raise ToolModuleLoadError(
                path=resolved, reason=f"module defines no {_REGISTER_HOOK}() function"
            )

        try:
            hook(self)
        except ToolEvalError:
            raise
        except Exception as exc:
            raise ToolModuleLoadError(
                path=resolved,
                reason=f"{_REGISTER_HOOK}() raised {type(exc).__name__}: {exc}",
            ) from exc

        self._loaded_modules.add(resolved)
        self._observer.tool_module_loaded(
            path=str(resolved),
            factory_count=len(self._registrations) - before,
        )


def make_tool_factory(
    executor: ToolExecutor,
    default_name: str,
    description: str,
    parameters: JsonSchema,
) -> ToolFactory:
    """Wrap a plain ``executor(context, **arguments)`` function as a ToolFactory."""

    def factory(context: ExecutionContext, display_name: str | None) -> Tool:
        return Tool(
            name=display_name or default_name,
            description=description,
            func=functools.partial(executor, context),
            parameters=parameters,
        )

    return factory


def _import_file(path: Path) -> Any:
    # Module name is unique per resolved path.
    digest = hashlib.sha256(str(path).encode()).hexdigest()[:12]
    module_name = f"tool_eval_tools_{path.stem}_{digest}"

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ToolModuleLoadError(path=path, reason="not an importable Python file")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except FileNotFoundError as exc:
        raise ToolModuleLoadError(path=path, reason="file not found") from exc
    except Exception as exc:
        raise ToolModuleLoadError(
            path=path, reason=f"import raised {type(exc).__name__}: {exc}"
        ) from exc
    return module
