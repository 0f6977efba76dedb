"""Command: write a settings template for a human to complete."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from propbind.commands._base import PropCommand, encoding_option, model_option, source_argument

if TYPE_CHECKING:
    from propbind.commands._context import AppContext


@click.command(
    cls=PropCommand,
    examples="""\
  propbind template app.cfg --model myapp.config:AppConfig -o app.template.cfg
  propbind template partial.cfg -m myapp.config:AppConfig -o complete-me.cfg""",
)
@source_argument
@model_option
@click.option(
    "-o",
    "--output",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write the template to.",
)
@encoding_option
@click.pass_obj
def template(app: AppContext, source: Path, model: str, output: Path, encoding: str | None) -> None:
    """Bind SOURCE best-effort and store every setting, blanks included, to OUTPUT."""
    app.emit(app.service().template(source, model, output, encoding=encoding))
