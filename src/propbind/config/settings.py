"""Unified settings — CLI flags, env vars, and pyproject config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PROPBIND_*`` prefix
  3. TOML table   — ``[tool.propbind]`` of the nearest ``pyproject.toml``
  4. Code defaults

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`propbind.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from propbind.config.discovery import find_config, load_tool_table


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the ``[tool.propbind]`` table of a pyproject file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = load_tool_table(toml_path)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PropbindSettings(BaseSettings):
    """Unified settings for the propbind CLI.

    Stored on the :class:`~propbind.commands._context.AppContext` in
    ``click.Context.obj`` at the CLI root level.

    Attributes:
        comment: Prefix marking comment lines in settings files.
        encoding: Explicit source encoding; None reads UTF-8 and honours
            an ``encoding`` entry in the file.
        trim: Strip surrounding whitespace from values.
        plugins: Discover converter plugins from entry points.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PROPBIND_",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Parsing and binding ---
    comment: str = Field(default="#", min_length=1)
    encoding: str | None = None
    trim: bool = True
    plugins: bool = True

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(cls, *, config_path: str | None = None, **cli_flags: Any) -> PropbindSettings:
        """Construct settings from a CLI invocation.

        Flags left at ``None`` were not given on the command line and do
        not override env vars or the TOML table.
        """
        toml_path: Path | None
        if config_path:
            p = Path(config_path)
            toml_path = p if p.is_file() else None
        else:
            toml_path = find_config()

        overrides = {key: value for key, value in cli_flags.items() if value is not None}
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
