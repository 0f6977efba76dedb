"""Command: strictly validate a settings file against a Config class."""

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
  propbind check app.cfg --model myapp.config:AppConfig
  propbind --json check app.cfg -m myapp.config:AppConfig""",
)
@source_argument
@model_option
@encoding_option
@click.pass_obj
def check(app: AppContext, source: Path, model: str, encoding: str | None) -> None:
    """Bind SOURCE strictly and report every missing or malformed setting."""
    app.emit(app.service().check(source, model, encoding=encoding))
