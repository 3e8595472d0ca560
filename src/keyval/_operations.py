"""
Tree algorithms shared by KeyVal.

These functions operate on the plain node representation (dict, list,
scalars) and know nothing about the KeyVal wrapper:

- walk: descend a path of mapping keys, optionally filling gaps
- deep_copy: rebuild every container so nothing is shared
- stack: merge a top layer onto a base layer in place
- normalize_numbers: convert ints to floats, in place for containers
- split_key: split a delimited path string into keys

Example:
    >>> base = {"model": {"name": "llama", "size": "7b"}}
    >>> stack(base, {"model": {"size": "70b"}})
    >>> base
    {'model': {'name': 'llama', 'size': '70b'}}
"""

from __future__ import annotations

import logging as _logging
import math as _math
import typing as _typing

import keyval._types as _types
import keyval.errors as errors

_logger = _logging.getLogger(__name__)

DEFAULT_DELIMITER = "."


def is_mapping(value: _typing.Any) -> bool:
    """Check if a value is a mapping node."""
    return isinstance(value, dict)


def is_sequence(value: _typing.Any) -> bool:
    """Check if a value is a sequence node."""
    return isinstance(value, list)


def split_key(key: str, delim: str = DEFAULT_DELIMITER) -> list[str]:
    """
    Split a multi-part key string into its separate components.

    Splitting is naive: there is no escaping, so a delimiter can never be
    part of a key.

    Args:
        key: Delimited key string (e.g., "server.http.port").
        delim: Delimiter between components. Defaults to ".".

    Returns:
        List of key components. An empty string yields [""].

    Raises:
        ValueError: If delim is empty.
    """
    if not delim:
        raise ValueError("Delimiter must be a non-empty string")
    return key.split(delim)


def normalize_numbers(value: _typing.Any) -> _typing.Any:
    """
    Convert integers to floats so all stored numbers share one representation.

    Containers are normalized in place (the same dict and list objects are
    returned) so callers that alias a structure keep seeing it. Booleans are
    left alone even though bool subclasses int.

    Integers beyond float range become a signed infinity, the same value
    the JSON decoder produces for such a literal.

    Args:
        value: Any node.

    Returns:
        The normalized node.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return _math.inf if value > 0 else -_math.inf
    if isinstance(value, dict):
        for key, child in value.items():
            if isinstance(child, (int, dict, list)) and not isinstance(child, bool):
                value[key] = normalize_numbers(child)
        return value
    if isinstance(value, list):
        for idx, child in enumerate(value):
            if isinstance(child, (int, dict, list)) and not isinstance(child, bool):
                value[idx] = normalize_numbers(child)
        return value
    return value


def walk(
    root: _types.Mapping,
    fill: bool,
    *keys: str,
) -> _types.Mapping:
    """
    Walk a path of mapping keys from root and return the mapping reached.

    Callers pass every key except the final target key, then assign the
    target into the returned mapping.

    In fill mode, missing keys get a new empty mapping, and keys holding a
    non-mapping value have that value replaced with an empty mapping. Without
    fill mode the tree is never modified.

    Args:
        root: The mapping to start from.
        fill: Whether to create (or overwrite) intermediate mappings.
        *keys: Keys to follow.

    Returns:
        The mapping at the end of the path.

    Raises:
        TypeMismatchError: If the current position is not a mapping.
        KeyMissingError: If a key is absent and fill is False.
        KeyUnreachableError: If a key holds a non-mapping and fill is False.
    """
    pos: _typing.Any = root
    for depth, key in enumerate(keys):
        if not is_mapping(pos):
            raise errors.TypeMismatchError(
                "Object at key was incorrect type", keys[:depth]
            )
        if key not in pos:
            if not fill:
                raise errors.KeyMissingError(
                    "Key missing during object traversal", keys[: depth + 1]
                )
            pos[key] = {}
        elif not is_mapping(pos[key]):
            if not fill:
                raise errors.KeyUnreachableError(
                    "Key was not reachable", keys[: depth + 1]
                )
            _logger.debug(
                "Replacing %s value at %r with a mapping",
                type(pos[key]).__name__,
                ".".join(keys[: depth + 1]),
            )
            pos[key] = {}
        pos = pos[key]

    if not is_mapping(pos):
        raise errors.TypeMismatchError("Object at key was incorrect type", keys)
    return _typing.cast(_types.Mapping, pos)


def deep_copy(obj: _types.Node) -> _types.Node:
    """
    Return a deep copy of a node.

    Every dict and list is rebuilt; scalars are immutable and returned as is.
    The copy shares no mutable container with obj at any depth.
    """
    if isinstance(obj, list):
        target_list: _types.Sequence = []
        for val in obj:
            if isinstance(val, (list, dict)):
                val = deep_copy(val)
            target_list.append(val)
        return target_list
    if isinstance(obj, dict):
        target: _types.Mapping = {}
        for key, val in obj.items():
            if isinstance(val, (list, dict)):
                val = deep_copy(val)
            target[key] = val
        return target
    return obj


def stack(base: _types.Mapping, top: _types.Mapping) -> None:
    """
    Stack top atop base, modifying base in place.

    For each key in top: if both the base value and the top value are
    mappings, they are merged recursively. Otherwise the top value replaces
    the base value (lists are replaced wholesale, never concatenated).

    Values from top are inserted by reference. Copy both layers first if
    they must stay independent (KeyVal.stack does this).

    Args:
        base: The lower-precedence layer, modified in place.
        top: The higher-precedence layer.
    """
    for key, new_val in top.items():
        orig_val = base.get(key)
        if key in base and is_mapping(new_val) and is_mapping(orig_val):
            stack(orig_val, new_val)
        else:
            base[key] = new_val
