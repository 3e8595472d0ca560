"""
Tests that enforce coding standards.

These tests verify that the codebase follows our import and logging
conventions:
- 'import X as _x' for external modules, 'import keyval.x as x' internally
- no 'from X import Y' outside __init__.py (except __future__)
- loggers are module-level '_logger = _logging.getLogger(__name__)'
"""

import ast as _ast
import pathlib as _pathlib

import pytest as _pytest

# Directories to check
SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "keyval"
TESTS_DIR = _pathlib.Path(__file__).parent

PACKAGE = "keyval"


def _get_python_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    """Get all Python files in a directory, recursively."""
    return sorted(directory.rglob("*.py"))


def _parse(path: _pathlib.Path) -> _ast.Module:
    return _ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _type_checking_lines(tree: _ast.Module) -> set[int]:
    """Return line numbers inside 'if TYPE_CHECKING:' blocks."""
    lines: set[int] = set()
    for node in _ast.walk(tree):
        if not isinstance(node, _ast.If):
            continue
        test = node.test
        name = test.attr if isinstance(test, _ast.Attribute) else getattr(test, "id", None)
        if name == "TYPE_CHECKING":
            for child in node.body:
                end = child.end_lineno or child.lineno
                lines.update(range(child.lineno, end + 1))
    return lines


def _from_import_violations(path: _pathlib.Path) -> list[str]:
    """List 'from X import Y' statements outside TYPE_CHECKING blocks."""
    tree = _parse(path)
    allowed = _type_checking_lines(tree)
    violations = []
    for node in _ast.walk(tree):
        if (
            isinstance(node, _ast.ImportFrom)
            and node.module != "__future__"
            and node.lineno not in allowed
        ):
            violations.append(f"{path}:{node.lineno}: from {node.module} import ...")
    return violations


def _alias_violations(path: _pathlib.Path) -> list[str]:
    """List external imports in src not bound to an underscore alias."""
    violations = []
    for node in _ast.walk(_parse(path)):
        if not isinstance(node, _ast.Import):
            continue
        for alias in node.names:
            if alias.name.split(".")[0] == PACKAGE:
                continue
            if alias.asname is None or not alias.asname.startswith("_"):
                violations.append(f"{path}:{node.lineno}: import {alias.name}")
    return violations


class TestImportStyle:
    """Tests for import style compliance."""

    def test_src_no_from_imports(self) -> None:
        """Source files should not use 'from X import Y' pattern."""
        violations: list[str] = []
        for path in _get_python_files(SRC_DIR):
            if path.name == "__init__.py":
                # Re-exports are allowed
                continue
            violations.extend(_from_import_violations(path))

        if violations:
            _pytest.fail(
                "Found forbidden 'from X import Y' imports:\n"
                + "\n".join(f"  {v}" for v in violations)
                + "\n\nUse 'import X as _x' (external) or 'import X as x' (internal) instead."
            )

    def test_tests_no_from_imports(self) -> None:
        """Test files should not use 'from X import Y' pattern."""
        violations: list[str] = []
        for path in _get_python_files(TESTS_DIR):
            violations.extend(_from_import_violations(path))

        if violations:
            _pytest.fail(
                "Found forbidden 'from X import Y' imports:\n"
                + "\n".join(f"  {v}" for v in violations)
            )

    def test_src_external_imports_are_private(self) -> None:
        """External modules are imported under an underscore alias."""
        violations: list[str] = []
        for path in _get_python_files(SRC_DIR):
            violations.extend(_alias_violations(path))

        assert not violations, "\n".join(violations)


class TestLoggingStyle:
    """Tests for logger declarations."""

    def test_loggers_named_after_module(self) -> None:
        """Modules that log declare '_logger = _logging.getLogger(__name__)'."""
        expected = "_logger = _logging.getLogger(__name__)"
        violations = []
        for path in _get_python_files(SRC_DIR):
            content = path.read_text(encoding="utf-8")
            if "_logger." in content and expected not in content:
                violations.append(str(path))

        assert not violations, f"Missing '{expected}' in: {violations}"

    def test_no_print_in_src(self) -> None:
        """Library code reports through logging, never print()."""
        violations = []
        for path in _get_python_files(SRC_DIR):
            for node in _ast.walk(_parse(path)):
                if (
                    isinstance(node, _ast.Call)
                    and isinstance(node.func, _ast.Name)
                    and node.func.id == "print"
                ):
                    violations.append(f"{path}:{node.lineno}")

        assert not violations, "\n".join(violations)


class TestImportExtraction:
    """Tests for the import detection logic itself."""

    def _write(self, tmp_path: _pathlib.Path, content: str) -> _pathlib.Path:
        path = tmp_path / "sample.py"
        path.write_text(content, encoding="utf-8")
        return path

    def test_detects_from_import(self, tmp_path: _pathlib.Path) -> None:
        """Should detect basic from imports."""
        path = self._write(tmp_path, "from pathlib import Path\n")
        assert len(_from_import_violations(path)) == 1

    def test_allows_future_imports(self, tmp_path: _pathlib.Path) -> None:
        """Should allow __future__ imports."""
        path = self._write(tmp_path, "from __future__ import annotations\n")
        assert _from_import_violations(path) == []

    def test_ignores_type_checking_block(self, tmp_path: _pathlib.Path) -> None:
        """Should ignore imports inside TYPE_CHECKING blocks."""
        content = (
            "import typing as _typing\n"
            "\n"
            "if _typing.TYPE_CHECKING:\n"
            "    from some_module import SomeType\n"
            "\n"
            "from forbidden import Other\n"
        )
        path = self._write(tmp_path, content)

        violations = _from_import_violations(path)

        assert len(violations) == 1
        assert "forbidden" in violations[0]

    def test_detects_unaliased_external_import(self, tmp_path: _pathlib.Path) -> None:
        content = "import yaml\nimport json as _json\nimport keyval.errors as errors\n"
        path = self._write(tmp_path, content)

        violations = _alias_violations(path)

        assert len(violations) == 1
        assert "import yaml" in violations[0]
