"""
keyval — a path-addressed tree of nested mappings for layered configuration.

Trees are built from JSON, YAML, or an existing dict, read and written by
key path, and combined by stacking one layer atop another. Nested mappings
merge recursively; every other value is replaced by the higher layer.

Example:
    >>> import keyval
    >>> defaults = keyval.KeyVal.from_yaml(b"model:\\n  name: llama\\n  size: 7b\\n")
    >>> user = keyval.KeyVal.from_json(b'{"model": {"size": "70b"}}')
    >>> merged = defaults.stack(user)
    >>> merged.string(*keyval.split_key("model.size"))
    '70b'
"""

from keyval._core import KeyVal, stack_layers
from keyval._operations import split_key
from keyval.errors import (
    ConfigFileError,
    DecodeError,
    EncodeError,
    KeyMissingError,
    KeyUnreachableError,
    KeyValError,
    TypeMismatchError,
)

__all__ = [
    "ConfigFileError",
    "DecodeError",
    "EncodeError",
    "KeyMissingError",
    "KeyUnreachableError",
    "KeyVal",
    "KeyValError",
    "TypeMismatchError",
    "split_key",
    "stack_layers",
]
