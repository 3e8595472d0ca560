"""
Shared pytest fixtures for keyval tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import keyval
import keyval.config as config

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "KEYVAL_JSON_INDENT",
    "KEYVAL_JSON_SORT_KEYS",
    "KEYVAL_YAML_SORT_KEYS",
    "KEYVAL_YAML_DEFAULT_FLOW_STYLE",
    "KEYVAL_YAML_ALLOW_UNICODE",
]


@_pytest.fixture(autouse=True)
def isolated_settings(
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Iterator[None]:
    """Run every test with default codec settings and a fresh settings cache."""
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@_pytest.fixture
def base_layer() -> keyval.KeyVal:
    """Lower layer used by the stacking tests."""
    return keyval.KeyVal.from_json(
        b'{"hello": 1, "world": {"something": 2}, "wilbur": "razzle"}'
    )


@_pytest.fixture
def top_layer() -> keyval.KeyVal:
    """Higher layer used by the stacking tests."""
    return keyval.KeyVal.from_json(
        b'{"hello": 3, "yellow": 56, "world": {"another": 32, "yetanother": 33}}'
    )


@_pytest.fixture
def config_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """Directory holding one defaults file and one user override file."""
    (tmp_path / "defaults.yaml").write_text(
        "server:\n"
        "  host: localhost\n"
        "  port: 80\n"
        "plugins:\n"
        "  - core\n"
        "debug: false\n",
        encoding="utf-8",
    )
    (tmp_path / "user.json").write_text(
        '{"server": {"port": 8080}, "plugins": ["extra"]}',
        encoding="utf-8",
    )
    return tmp_path
