"""Command: bind a settings file and print the merged settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from propbind.commands._base import PropCommand, encoding_option, model_option, source_argument

if TYPE_CHECKING:
    from pathlib import Path

    from propbind.commands._context import AppContext


@click.command(
    cls=PropCommand,
    examples="""\
  propbind show app.cfg --model myapp.config:AppConfig
  propbind show app.cfg -m myapp.config:AppConfig --stump
  propbind --json show legacy.cfg -m myapp.config:AppConfig --encoding latin-1""",
)
@source_argument
@model_option
@click.option("--stump", is_flag=True, help="Bind best-effort and show blanks instead of failing.")
@encoding_option
@click.pass_obj
def show(app: AppContext, source: Path, model: str, stump: bool, encoding: str | None) -> None:
    """Bind SOURCE onto a Config class and print the resulting settings."""
    app.emit(app.service().show(source, model, stump=stump, encoding=encoding))
