"""Recursive ${ENV_VAR} interpolation for raw config data.

Supports ``${NAME}`` (required) and ``${NAME:-fallback}`` (optional, the
fallback may be empty). Only required references count as missing.
"""

import os
import re
from typing import TypeAlias

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

RawValue: TypeAlias = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(data: RawValue) -> list[str]:
    """Return the names of all required env vars referenced in data but unset."""
    missing: list[str] = []
    _collect(data, missing)
    return missing


def _collect(data: RawValue, missing: list[str]) -> None:
    if isinstance(data, str):
        for match in _ENV_VAR_PATTERN.finditer(data):
            var_name, fallback = match.group(1), match.group(2)
            if fallback is not None:
                continue
            if var_name not in os.environ and var_name not in missing:
                missing.append(var_name)
    elif isinstance(data, list):
        for item in data:
            _collect(item, missing)
    elif isinstance(data, dict):
        for value in data.values():
            _collect(value, missing)


def _substitute(match: re.Match[str]) -> str:
    var_name, fallback = match.group(1), match.group(2)
    if fallback is None:
        return os.environ[var_name]
    return os.environ.get(var_name, fallback)


def interpolate(data: RawValue) -> RawValue:
    """
    Recursively substitute every ${ENV_VAR} reference with its runtime value.

    Call `collect_missing_vars` first; a missing required variable raises KeyError.
    """
    if isinstance(data, str):
        return _ENV_VAR_PATTERN.sub(_substitute, data)
    if isinstance(data, list):
        return [interpolate(item) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value) for key, value in data.items()}
    return data
