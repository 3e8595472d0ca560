"""
Exceptions raised by keyval.

All errors derive from KeyValError. The lookup and type errors also derive
from the matching builtin (LookupError, TypeError, ValueError) so callers
that only know the builtins can still catch them.
"""

from __future__ import annotations

import pathlib as _pathlib


class KeyValError(Exception):
    """Base class for all keyval errors."""

    def __init__(self, message: str, keys: tuple[str, ...] = ()) -> None:
        self.keys = tuple(keys)
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        if self.keys:
            return f"{self.message} (path: {'.'.join(self.keys)})"
        return self.message


class TypeMismatchError(KeyValError, TypeError):
    """A traversal step or typed accessor found the wrong kind of node."""

    pass


class KeyMissingError(KeyValError, LookupError):
    """A required key does not exist at the current mapping."""

    pass


class KeyUnreachableError(KeyValError, LookupError):
    """An intermediate key exists but does not hold a mapping."""

    pass


class DecodeError(KeyValError, ValueError):
    """JSON or YAML input is malformed or is not a mapping at the top level."""

    pass


class EncodeError(KeyValError, ValueError):
    """The tree holds a value the target format cannot represent."""

    pass


class ConfigFileError(KeyValError):
    """Error loading or parsing a configuration layer file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")
