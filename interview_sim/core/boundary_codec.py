"""
Boundary Codec - key-naming conversion at the network boundary.

The session core works with camelCase keys (local format). The remote
question service speaks snake_case (wire format). Every request body is run
through ``to_wire_format`` and every response body through
``to_local_format``. Only keys are rewritten; values are never inspected.

Key rules:
- local -> wire: each uppercase ASCII letter ``X`` becomes ``_x``
- wire -> local: each ``_`` followed by a lowercase ASCII letter ``x``
  becomes ``X``; any other character is kept as-is

For keys made only of ASCII letters and digits the two rules are exact
inverses, so ``to_local_format(to_wire_format(tree)) == tree``. Keys that
already carry underscores (or other separators) are converted best-effort
and may not round-trip.
"""

import re
from typing import Any

_UPPER = re.compile(r"[A-Z]")
_UNDERSCORE_LOWER = re.compile(r"_([a-z])")


def camel_to_snake(key: str) -> str:
    """Convert a camelCase key to snake_case."""
    return _UPPER.sub(lambda m: "_" + m.group(0).lower(), key)


def snake_to_camel(key: str) -> str:
    """Convert a snake_case key to camelCase."""
    return _UNDERSCORE_LOWER.sub(lambda m: m.group(1).upper(), key)


def _convert_keys(tree: Any, convert) -> Any:
    if isinstance(tree, dict):
        return {
            (convert(key) if isinstance(key, str) else key): _convert_keys(value, convert)
            for key, value in tree.items()
        }
    if isinstance(tree, list):
        return [_convert_keys(item, convert) for item in tree]
    if isinstance(tree, tuple):
        return tuple(_convert_keys(item, convert) for item in tree)
    return tree


def to_wire_format(tree: Any) -> Any:
    """Rewrite all mapping keys in ``tree`` from local to wire format."""
    return _convert_keys(tree, camel_to_snake)


def to_local_format(tree: Any) -> Any:
    """Rewrite all mapping keys in ``tree`` from wire to local format."""
    return _convert_keys(tree, snake_to_camel)
