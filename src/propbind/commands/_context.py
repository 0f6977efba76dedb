"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from propbind.output.formatters import format_result

if TYPE_CHECKING:
    from propbind.config.settings import PropbindSettings
    from propbind.plugins.manager import PluginManager
    from propbind.services.bind import BindService
    from propbind.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  Converter plugins are
    discovered on first use so ``--help`` and ``--version`` never import
    third-party entry points.
    """

    def __init__(self, settings: PropbindSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from propbind.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager | None:
        """Loaded plugin manager, or None when plugins are disabled."""
        if not self.settings.plugins:
            return None
        if self._plugins is None:
            from propbind.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load()
        return self._plugins

    def service(self) -> BindService:
        from propbind.services.bind import BindService

        return BindService(self.settings, self.plugins)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
