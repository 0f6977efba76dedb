"""Shared pytest fixtures and test helpers for propbind tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from propbind.binding.converters import ConverterRegistry, default_registry


@pytest.fixture
def _restore_root_logging() -> Generator[None]:
    """Undo the handler swap done by the CLI's configure_logging call."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from tmp_path with no PROPBIND_* overrides so settings use defaults."""
    monkeypatch.chdir(tmp_path)
    for name in ("PROPBIND_CONFIG", "PROPBIND_COMMENT", "PROPBIND_ENCODING", "PROPBIND_TRIM", "PROPBIND_PLUGINS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> ConverterRegistry:
    """Fresh registry with the built-in converters."""
    return default_registry()


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[..., Path]:
    """Write a settings file under tmp_path and return its path.

    Lines are joined with newlines; pass ``encoding`` to write raw bytes in
    another codec.
    """

    def _write(*lines: str, name: str = "app.cfg", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_bytes(("\n".join(lines) + "\n").encode(encoding))
        return path

    return _write


@pytest.fixture
def model_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Importable module ``pb_models`` defining the Config classes used by CLI tests.

    Returns the module name for ``--model pb_models:ClassName`` references.
    """
    package_dir = tmp_path / "models"
    package_dir.mkdir()
    (package_dir / "pb_models.py").write_text(
        '''\
from __future__ import annotations

from typing import Annotated

from propbind import Config, Nested, Setting


class Database(Config):
    url: Annotated[str | None, Setting()] = None
    pool: Annotated[int, Setting(default="5")] = 0


class AppConfig(Config):
    name: Annotated[str | None, Setting(descriptor="app.name")] = None
    port: Annotated[int, Setting(descriptor="app.port", default="8080")] = 0
    debug: Annotated[bool, Setting(optional=True)] = False
    db: Annotated[Database | None, Nested(prefix="db.")] = None


class NotAConfig:
    pass
''',
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(package_dir))
    return "pb_models"
