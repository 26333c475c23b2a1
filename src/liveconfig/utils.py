"""Utility functions for liveconfig."""

from collections.abc import Mapping
from typing import Any


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries with overlay precedence.

    Recursively merges nested dictionaries. Non-dict values in overlay
    completely replace corresponding values in base.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        New merged dictionary (base and overlay are not modified)

    Examples:
        >>> deep_merge({"db": {"host": "a", "port": 1}}, {"db": {"host": "b"}})
        {'db': {'host': 'b', 'port': 1}}

        >>> deep_merge({"a": 1}, {})
        {'a': 1}
    """
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def find_key(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Look up a key case-insensitively.

    An exact match wins over a case-insensitive one.

    Examples:
        >>> find_key({"databaseConfig": 1}, "DATABASECONFIG")
        1
    """
    if key in data:
        return data[key]
    wanted = key.lower()
    for candidate, value in data.items():
        if isinstance(candidate, str) and candidate.lower() == wanted:
            return value
    return default


def split_section(section: str) -> list[str]:
    """Split a dotted section path into its segments.

    Examples:
        >>> split_section("servers.primary")
        ['servers', 'primary']
        >>> split_section("")
        []
    """
    return [part for part in section.split(".") if part]
