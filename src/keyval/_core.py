"""
KeyVal: a dynamically-typed tree of nested mappings addressed by key path.

A KeyVal owns a root dict whose values are dicts, lists, or scalars
(str, float, bool, None), the shape produced by decoding JSON or YAML.

Read semantics:
- value() follows a path of mapping keys and returns whatever is there
- Typed accessors (string, number, ...) require an exact kind, no coercion
- get_keyval() returns a view over a nested mapping (shared, not copied)

Write semantics:
- set_value() requires every parent mapping to exist
- create_value() creates missing parents, overwriting non-mappings
- Integers are stored as floats

Combining:
- copy() returns an independent deep copy
- stack() returns a new KeyVal with a layer deep-merged atop this one
"""

from __future__ import annotations

import typing as _typing

import keyval._codecs as _codecs
import keyval._operations as _operations
import keyval._types as _types
import keyval.config as config
import keyval.errors as errors


class KeyVal:
    """
    A tree of nested mappings, sequences, and scalars.

    Example:
        >>> defaults = KeyVal.from_json(b'{"server": {"host": "localhost", "port": 80}}')
        >>> user = KeyVal.from_yaml(b"server:\\n  port: 8080\\n")
        >>> merged = defaults.stack(user)
        >>> merged.number("server", "port")
        8080.0
        >>> merged.string("server", "host")
        'localhost'

    Args:
        root: Initial root mapping, used directly (not copied).
            None creates an empty tree.

    Note:
        **Ownership:** ``from_mapping`` and the constructor alias the dict
        they are given, and ``get_keyval`` returns a view sharing the
        parent's nested mapping. Writes through either are visible to every
        holder. ``copy`` and ``stack`` always build fresh structure::

            isolated = KeyVal.from_mapping(data).copy()

        **Thread safety:** Not thread-safe. A KeyVal is meant to be used by
        one owner at a time; callers sharing one between threads must
        provide their own locking.
    """

    __slots__ = ("_root",)

    def __init__(self, root: _types.Mapping | None = None) -> None:
        if root is None:
            root = {}
        if not isinstance(root, dict):
            raise errors.TypeMismatchError(
                f"Root must be a mapping, got {type(root).__name__}"
            )
        self._root: _types.Mapping = _operations.normalize_numbers(root)

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def from_json(cls, data: bytes | str | None = None) -> KeyVal:
        """
        Create a KeyVal from a JSON document.

        Args:
            data: JSON bytes or text. None or empty is treated as "{}".

        Raises:
            DecodeError: If the JSON is malformed or not an object.
        """
        return cls(_codecs.decode_json(data))

    @classmethod
    def from_yaml(cls, data: bytes | str | None = None) -> KeyVal:
        """
        Create a KeyVal from a YAML document.

        Args:
            data: YAML bytes or text. None or empty is treated as "{}".

        Raises:
            DecodeError: If the YAML is malformed or not a mapping.
        """
        return cls(_codecs.decode_yaml(data))

    @classmethod
    def from_mapping(cls, data: _types.Mapping | None = None) -> KeyVal:
        """
        Create a KeyVal wrapping an existing dict.

        The dict is used directly, not copied. Integers inside it are
        converted to floats in place.
        """
        return cls(data)

    # =========================================================================
    # Reads
    # =========================================================================

    def value(self, *keys: str) -> _typing.Any:
        """
        Return the value at a path.

        An empty path returns the root mapping.

        Raises:
            TypeMismatchError: If a non-mapping is met while traversing.
            KeyMissingError: If a key does not exist.
        """
        obj: _typing.Any = self._root
        for depth, key in enumerate(keys):
            if not _operations.is_mapping(obj):
                raise errors.TypeMismatchError(
                    "Encountered a non-mapping data type while traversing data",
                    keys[:depth],
                )
            if key not in obj:
                raise errors.KeyMissingError(
                    "Could not resolve value using key", keys[: depth + 1]
                )
            obj = obj[key]
        return obj

    def _typed_value(
        self,
        keys: tuple[str, ...],
        kind: str,
        check: _typing.Callable[[_typing.Any], bool],
    ) -> _typing.Any:
        v = self.value(*keys)
        if not check(v):
            raise errors.TypeMismatchError(
                f"Value was not {kind}, got {type(v).__name__}", keys
            )
        return v

    def string(self, *keys: str) -> str:
        """Return the str at a path, or raise TypeMismatchError."""
        return _typing.cast(
            str, self._typed_value(keys, "a string", lambda v: isinstance(v, str))
        )

    def number(self, *keys: str) -> float:
        """Return the float at a path, or raise TypeMismatchError.

        Booleans and numeric-looking strings are not numbers.
        """
        return _typing.cast(
            float,
            self._typed_value(keys, "a number", lambda v: isinstance(v, float)),
        )

    def boolean(self, *keys: str) -> bool:
        """Return the bool at a path, or raise TypeMismatchError."""
        return _typing.cast(
            bool, self._typed_value(keys, "a boolean", lambda v: isinstance(v, bool))
        )

    def array(self, *keys: str) -> _types.Sequence:
        """Return the list at a path (not a copy), or raise TypeMismatchError."""
        return _typing.cast(
            _types.Sequence,
            self._typed_value(keys, "an array", _operations.is_sequence),
        )

    def mapping(self, *keys: str) -> _types.Mapping:
        """Return the dict at a path (not a copy), or raise TypeMismatchError."""
        return _typing.cast(
            _types.Mapping,
            self._typed_value(keys, "a mapping", _operations.is_mapping),
        )

    def get_keyval(self, *keys: str) -> KeyVal:
        """
        Return a KeyVal view of the mapping at a path.

        The view shares storage with this KeyVal: setting a value through
        either is visible in both. Call copy() on the result for an
        independent tree.

        Raises:
            TypeMismatchError: If the value at the path is not a mapping.
            KeyMissingError: If a key does not exist.
        """
        v = self.value(*keys)
        if not _operations.is_mapping(v):
            raise errors.TypeMismatchError("Data at key was not a mapping", keys)
        return KeyVal(v)

    # =========================================================================
    # Writes
    # =========================================================================

    def _assign(self, value: _typing.Any, keys: tuple[str, ...], fill: bool) -> None:
        if not keys:
            # Nothing to do
            return
        v = _operations.normalize_numbers(value)
        if len(keys) == 1:
            self._root[keys[0]] = v
            return
        target = _operations.walk(self._root, fill, *keys[:-1])
        target[keys[-1]] = v

    def set_value(self, value: _typing.Any, *keys: str) -> None:
        """
        Set a nested value.

        Every parent mapping must already exist. The final key is created
        or overwritten. An empty path does nothing.

        Raises:
            KeyMissingError: If a parent key does not exist.
            KeyUnreachableError: If a parent key holds a non-mapping.
        """
        self._assign(value, keys, fill=False)

    def create_value(self, value: _typing.Any, *keys: str) -> None:
        """
        Set a nested value, creating missing parent mappings.

        A parent key holding a non-mapping value is overwritten with a new
        mapping; the old value is lost. An empty path does nothing.
        """
        self._assign(value, keys, fill=True)

    # =========================================================================
    # Copy and stack
    # =========================================================================

    def copy(self) -> KeyVal:
        """Return a deep copy sharing no mutable structure with this KeyVal."""
        return KeyVal(_typing.cast(_types.Mapping, _operations.deep_copy(self._root)))

    def stack(self, layer: KeyVal) -> KeyVal:
        """
        Return a new KeyVal with layer stacked atop this one.

        Nested mappings are merged recursively; any other value in layer
        replaces the value here. Neither KeyVal is modified.
        """
        base = _typing.cast(_types.Mapping, _operations.deep_copy(self._root))
        top = _typing.cast(_types.Mapping, _operations.deep_copy(layer._root))
        _operations.stack(base, top)
        return KeyVal(base)

    # =========================================================================
    # Export
    # =========================================================================

    def to_dict(self) -> _types.Mapping:
        """Return a deep copy of the tree as a plain dict."""
        return _typing.cast(_types.Mapping, _operations.deep_copy(self._root))

    def to_json(self, settings: config.CodecSettings | None = None) -> bytes:
        """
        Serialize the whole tree to JSON bytes.

        Raises:
            EncodeError: If the tree holds an infinite or NaN number.
        """
        return _codecs.encode_json(self._root, settings)

    def to_yaml(self, settings: config.CodecSettings | None = None) -> bytes:
        """Serialize the whole tree to YAML bytes."""
        return _codecs.encode_yaml(self._root, settings)

    # =========================================================================
    # Dunder methods
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyVal):
            return self._root == other._root
        return NotImplemented

    def __hash__(self) -> int:
        """KeyVal is not hashable (it is mutable)."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")

    def __repr__(self) -> str:
        return f"KeyVal({self._root!r})"


def stack_layers(*layers: KeyVal) -> KeyVal:
    """
    Stack any number of layers, lowest precedence first.

    Example:
        >>> merged = stack_layers(defaults, user, project)  # project wins

    Returns:
        A new KeyVal. With no layers, an empty KeyVal.
    """
    result = KeyVal()
    for layer in layers:
        result = result.stack(layer)
    return result
