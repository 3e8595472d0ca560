"""
Type aliases for keyval trees.

This module provides type aliases used throughout the package:
- Node: any value stored in a tree (mapping, sequence, or scalar)
- Mapping / Sequence: the two container kinds
- Path: Tuple of strings representing a nested key path
"""

from __future__ import annotations

import typing as _typing

# Scalars are immutable and are never copied by the deep copier
Scalar: _typing.TypeAlias = "str | float | bool | None"

# Path alias for nested key paths
# Example: ("server", "http", "port") represents server.http.port
Path: _typing.TypeAlias = tuple[str, ...]

if _typing.TYPE_CHECKING:
    # Recursive types for type checking
    Node: _typing.TypeAlias = "dict[str, Node] | list[Node] | Scalar"
    Mapping: _typing.TypeAlias = dict[str, Node]
    Sequence: _typing.TypeAlias = list[Node]
else:
    # Runtime-safe fallback (mypy uses TYPE_CHECKING branch)
    Node: _typing.TypeAlias = object
    Mapping: _typing.TypeAlias = dict[str, object]
    Sequence: _typing.TypeAlias = list[object]
