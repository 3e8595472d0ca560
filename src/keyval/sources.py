"""Layered configuration sources built on KeyVal.

This module provides:

- load_file: read a JSON or YAML file into a KeyVal
- load_layers: load several files and stack them into one KeyVal
- KeyValSettingsSource: a pydantic-settings source that stacks KeyVal
  layers and hands the merged dict to pydantic for validation

Layers are always given lowest precedence first, so the last layer wins:

    merged = load_layers(defaults_path, user_path, project_path)
"""

from __future__ import annotations

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings

import keyval._core as _core
import keyval.errors as errors

_logger = _logging.getLogger(__name__)

JSON_SUFFIXES = frozenset({".json"})
YAML_SUFFIXES = frozenset({".yaml", ".yml"})

PathLike: _typing.TypeAlias = "str | _os.PathLike[str]"


def load_file(path: PathLike) -> _core.KeyVal:
    """
    Load a JSON or YAML file into a KeyVal.

    The codec is chosen by file suffix (.json, .yaml, .yml). An empty file
    yields an empty KeyVal.

    Args:
        path: Path to the file.

    Returns:
        A KeyVal owning the decoded tree.

    Raises:
        ConfigFileError: If the suffix is unknown, the file cannot be read,
            or its content is malformed or not a mapping.
    """
    path = _pathlib.Path(path)
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        decode = _core.KeyVal.from_json
    elif suffix in YAML_SUFFIXES:
        decode = _core.KeyVal.from_yaml
    else:
        raise errors.ConfigFileError(
            path, f"unsupported file type {suffix or '(none)'!r}, expected JSON or YAML"
        )

    # Handle file read errors
    try:
        content = path.read_bytes()
    except PermissionError as e:
        raise errors.ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise errors.ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        kv = decode(content)
    except errors.DecodeError as e:
        raise errors.ConfigFileError(path, str(e)) from e

    _logger.debug("Loaded config layer %s", path)
    return kv


def load_layers(
    *paths: PathLike,
    required: _typing.Iterable[PathLike] = (),
) -> _core.KeyVal:
    """
    Load files and stack them, lowest precedence first.

    Missing files are skipped unless they are listed in required. A file
    that exists but holds no data is skipped with a warning.

    Args:
        *paths: Layer files in ascending precedence order.
        required: Paths that must exist. Each one must also appear in
            paths, since required only marks layers and never adds one.

    Returns:
        A new KeyVal holding the merged layers.

    Raises:
        ValueError: If required names a path that is not in paths.
        ConfigFileError: If a required file is missing, or any loaded file
            cannot be read or decoded.
    """
    layer_paths = [_pathlib.Path(p) for p in paths]
    required_paths = [_pathlib.Path(p) for p in required]
    unknown = [str(p) for p in required_paths if p not in layer_paths]
    if unknown:
        raise ValueError(f"required paths are not layers: {', '.join(unknown)}")
    for req in required_paths:
        if not req.exists():
            raise errors.ConfigFileError(req, "required config file not found")

    layers: list[_core.KeyVal] = []
    for path in layer_paths:
        if not path.exists():
            # Missing optional layer is normal (user hasn't created one yet)
            _logger.debug("Skipping missing config layer %s", path)
            continue
        layer = load_file(path)
        if not layer.mapping():
            _logger.warning("Config layer %s is empty, skipping", path)
            continue
        layers.append(layer)

    return _core.stack_layers(*layers)


class KeyValSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that stacks KeyVal layers for pydantic-settings.

    KeyVal is used only for merging. After merging, the result is a plain
    dict that pydantic validates and converts to typed fields.

    Example:
        >>> class AppSettings(pydantic_settings.BaseSettings):
        ...     @classmethod
        ...     def settings_customise_sources(cls, settings_cls, init_settings, *rest):
        ...         return (
        ...             init_settings,
        ...             KeyValSettingsSource(settings_cls, defaults, user_layer),
        ...         )
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        *layers: _core.KeyVal,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            *layers: KeyVal layers in ascending precedence order.
        """
        super().__init__(settings_cls)
        self._keyval = _core.stack_layers(*layers)

    @property
    def keyval(self) -> _core.KeyVal:
        """The merged layers, for path queries."""
        return self._keyval

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a top-level field from the merged layers.

        Returns:
            Tuple of (value, field_name, is_complex).
            is_complex is True if the value is a dict or list.
        """
        try:
            value = self._keyval.value(field_name)
        except errors.KeyMissingError:
            return None, field_name, False
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the merged layers as a plain dict for pydantic validation."""
        return self._keyval.to_dict()
