"""Custom Click base classes with --examples support.

Provides PropCommand and PropGroup that accept an ``examples`` parameter.
When ``--examples`` is passed, the command prints usage examples and exits.
This keeps ``--help`` concise while making examples available on demand.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class PropCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class PropGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = PropCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = PropCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


# Shared options of every binding command.
source_argument = click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
model_option = click.option(
    "-m",
    "--model",
    required=True,
    help="Config class as 'package.module:ClassName'.",
)
encoding_option = click.option(
    "--encoding",
    default=None,
    help="Read SOURCE with this encoding instead of UTF-8 / its encoding entry.",
)
