"""Utilities for handling YAML parsing quirks."""

from typing import Any, Dict, TypeVar

V = TypeVar("V")


def normalize_yaml_dict_keys(data: Dict[Any, V]) -> Dict[str, V]:
    """Normalize dictionary keys from YAML parsing to strings.

    YAML 1.1 boolean keys (e.g., yes, no, on, off) become Python booleans and
    bare numbers become ints. Test and file names in result trees are always
    strings, so every key is converted back with ``str``.

    Args:
        data: Dictionary that may contain non-string keys from YAML parsing.

    Returns:
        Dictionary with all keys converted to strings.

    Examples:
        >>> normalize_yaml_dict_keys({True: "a", 2: "b", "c": "c"})
        {'True': 'a', '2': 'b', 'c': 'c'}
    """
    return {str(key): value for key, value in data.items()}


def normalize_yaml_tree(data: Any) -> Any:
    """Recursively apply ``normalize_yaml_dict_keys`` to nested mappings and lists."""
    if isinstance(data, dict):
        return {k: normalize_yaml_tree(v) for k, v in normalize_yaml_dict_keys(data).items()}
    if isinstance(data, list):
        return [normalize_yaml_tree(item) for item in data]
    return data
