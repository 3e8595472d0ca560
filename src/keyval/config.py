"""
Codec settings using pydantic-settings.

Controls how KeyVal.to_json and KeyVal.to_yaml format their output.
Values come from (highest precedence first):
1. Constructor arguments
2. Environment variables with the KEYVAL_ prefix
3. Field defaults

Example:
    KEYVAL_JSON_INDENT=2 pretty-prints JSON exports.
"""

from __future__ import annotations

import functools as _functools

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings


class CodecSettings(_pydantic_settings.BaseSettings):
    """Formatting options for JSON and YAML export."""

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="KEYVAL_",
        extra="ignore",
    )

    json_indent: int | None = _pydantic.Field(
        default=None,
        description="Indent width for JSON output (None = compact, one line)",
    )

    json_sort_keys: bool = _pydantic.Field(
        default=True,
        description="Sort JSON object keys alphabetically",
    )

    yaml_sort_keys: bool = _pydantic.Field(
        default=True,
        description="Sort YAML mapping keys",
    )

    yaml_default_flow_style: bool = _pydantic.Field(
        default=False,
        description="Emit flow-style ({a: 1}) YAML instead of block style",
    )

    yaml_allow_unicode: bool = _pydantic.Field(
        default=True,
        description="Write non-ASCII characters as is instead of escaping",
    )

    @_pydantic.field_validator("json_indent")
    @classmethod
    def _validate_indent(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("json_indent must be >= 0")
        return v


@_functools.lru_cache(maxsize=1)
def get_settings() -> CodecSettings:
    """Return the process-wide CodecSettings, built on first use."""
    return CodecSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
