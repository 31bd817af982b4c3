"""${ENV_VAR} substitution over parsed YAML data."""

import os
import re
from collections.abc import Mapping
from typing import TypeAlias

_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

RawValue: TypeAlias = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def find_unset_variables(
    data: RawValue, environ: Mapping[str, str] | None = None
) -> list[str]:
    """Return every referenced variable that is unset, in first-seen order."""
    env = os.environ if environ is None else environ
    unset: list[str] = []
    for text in _strings(data):
        for match in _REFERENCE.finditer(text):
            name = match.group(1)
            if name not in env and name not in unset:
                unset.append(name)
    return unset


def substitute(data: RawValue, environ: Mapping[str, str] | None = None) -> RawValue:
    """Return a copy of data with each ${NAME} replaced by its environment value.

    Callers check find_unset_variables first; an unset name raises KeyError.
    """
    env = os.environ if environ is None else environ
    if isinstance(data, str):
        return _REFERENCE.sub(lambda m: env[m.group(1)], data)
    if isinstance(data, list):
        return [substitute(item, env) for item in data]
    if isinstance(data, dict):
        return {key: substitute(value, env) for key, value in data.items()}
    return data


def _strings(data: RawValue) -> list[str]:
    if isinstance(data, str):
        return [data]
    if isinstance(data, list):
        return [text for item in data for text in _strings(item)]
    if isinstance(data, dict):
        return [text for value in data.values() for text in _strings(value)]
    return []
