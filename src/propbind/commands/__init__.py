"""Subcommand modules for propbind.

Provides register_commands() which uses deferred imports to keep
``propbind --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from propbind.commands.check import check
    from propbind.commands.show import show
    from propbind.commands.template import template

    cli.add_command(show)
    cli.add_command(check)
    cli.add_command(template)
