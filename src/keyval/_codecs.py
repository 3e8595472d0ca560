"""
JSON and YAML glue for KeyVal.

Decoding produces a plain dict whose integers are already floats, and
rejects documents that are not a mapping at the top level. Encoding reads
its formatting options from keyval.config and writes integral numbers
without a fractional part ("3", not "3.0").
"""

from __future__ import annotations

import json as _json
import math as _math
import typing as _typing

import yaml as _yaml

import keyval._operations as _operations
import keyval._types as _types
import keyval.config as config
import keyval.errors as errors

EMPTY_DOCUMENT = b"{}"


class _NormalizingLoader(_yaml.SafeLoader):
    """YAML loader that only produces tree nodes.

    Integers are stored as floats and mapping keys as strings. Tags that
    SafeLoader would turn into other Python types are mapped onto nodes:
    timestamps and !!binary stay as their scalar text, !!set becomes a
    mapping of nulls, and !!omap / !!pairs become a list of mappings.
    """

    def construct_yaml_int(self, node: _yaml.ScalarNode) -> float:  # type: ignore[override]
        return float(super().construct_yaml_int(node))

    def construct_mapping(
        self, node: _yaml.MappingNode, deep: bool = False
    ) -> dict[str, _typing.Any]:
        """Override to coerce non-string keys (e.g. `1: a`) to str."""
        mapping = super().construct_mapping(node, deep=deep)
        return {
            (key if isinstance(key, str) else _key_to_str(key)): value
            for key, value in mapping.items()
        }


_NormalizingLoader.add_constructor(
    "tag:yaml.org,2002:int", _NormalizingLoader.construct_yaml_int
)
_NormalizingLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", _NormalizingLoader.construct_yaml_str
)
_NormalizingLoader.add_constructor(
    "tag:yaml.org,2002:binary", _NormalizingLoader.construct_yaml_str
)
_NormalizingLoader.add_constructor(
    "tag:yaml.org,2002:set", _NormalizingLoader.construct_yaml_map
)
_NormalizingLoader.add_constructor(
    "tag:yaml.org,2002:omap", _NormalizingLoader.construct_yaml_seq
)
_NormalizingLoader.add_constructor(
    "tag:yaml.org,2002:pairs", _NormalizingLoader.construct_yaml_seq
)


def _key_to_str(key: _typing.Any) -> str:
    # Float keys were ints in the source document (1 -> 1.0), keep "1"
    if isinstance(key, float) and key.is_integer():
        return str(int(key))
    if isinstance(key, bool) or key is None:
        return _json.dumps(key)
    return str(key)


def _check_mapping(data: _typing.Any, codec: str) -> _types.Mapping:
    if not isinstance(data, dict):
        type_name = type(data).__name__
        raise errors.DecodeError(
            f"{codec} document must be a mapping at the top level, got {type_name}"
        )
    return data


def decode_json(data: bytes | str | None) -> _types.Mapping:
    """
    Decode a JSON document into a mapping.

    Args:
        data: JSON text or bytes. None or empty is treated as "{}".

    Returns:
        The decoded mapping, with integers parsed as floats.

    Raises:
        DecodeError: If the JSON is malformed or not an object.
    """
    if not data:
        data = EMPTY_DOCUMENT
    try:
        parsed = _json.loads(data, parse_int=float)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise errors.DecodeError(f"invalid JSON: {e}") from e
    return _check_mapping(parsed, "JSON")


def decode_yaml(data: bytes | str | None) -> _types.Mapping:
    """
    Decode a YAML document into a mapping.

    Args:
        data: YAML text or bytes. None or empty is treated as "{}".
            A document holding only comments (or an explicit null) also
            decodes to an empty mapping.

    Returns:
        The decoded mapping, with integers as floats and keys as strings.
        Anchored nodes are copied at every alias, so no container appears
        twice in the tree.

    Raises:
        DecodeError: If the YAML is malformed, is not valid UTF-8, contains
            unprintable characters, or is not a mapping.
    """
    if not data:
        data = EMPTY_DOCUMENT
    loader = None
    try:
        # The reader decodes and checks the whole buffer on construction
        loader = _NormalizingLoader(data)
        parsed = loader.get_single_data()
    except _yaml.YAMLError as e:
        raise errors.DecodeError(f"invalid YAML: {e}") from e
    finally:
        if loader is not None:
            loader.dispose()

    if parsed is None:
        return {}
    return _operations.deep_copy(_check_mapping(parsed, "YAML"))


def _integral_numbers(value: _typing.Any) -> _typing.Any:
    """Return a copy of value with finite whole floats turned into ints."""
    if isinstance(value, float):
        if _math.isfinite(value) and value.is_integer():
            return int(value)
        return value
    if isinstance(value, dict):
        return {key: _integral_numbers(child) for key, child in value.items()}
    if isinstance(value, list):
        return [_integral_numbers(child) for child in value]
    return value


def encode_json(
    root: _types.Mapping,
    settings: config.CodecSettings | None = None,
) -> bytes:
    """
    Serialize a mapping to UTF-8 JSON bytes.

    Raises:
        EncodeError: If the tree holds an infinite or NaN number, which
            JSON cannot represent.
    """
    if settings is None:
        settings = config.get_settings()
    separators = (",", ":") if settings.json_indent is None else None
    try:
        text = _json.dumps(
            _integral_numbers(root),
            indent=settings.json_indent,
            sort_keys=settings.json_sort_keys,
            separators=separators,
            ensure_ascii=False,
            allow_nan=False,
        )
    except ValueError as e:
        raise errors.EncodeError(f"cannot encode as JSON: {e}") from e
    return text.encode("utf-8")


def encode_yaml(
    root: _types.Mapping,
    settings: config.CodecSettings | None = None,
) -> bytes:
    """Serialize a mapping to UTF-8 YAML bytes."""
    if settings is None:
        settings = config.get_settings()
    text = _yaml.safe_dump(
        _integral_numbers(root),
        sort_keys=settings.yaml_sort_keys,
        default_flow_style=settings.yaml_default_flow_style,
        allow_unicode=settings.yaml_allow_unicode,
    )
    return text.encode("utf-8")
