"""Root CLI group for propbind with global flags and command registration."""

from __future__ import annotations

import click

from propbind import __version__
from propbind.commands import register_commands
from propbind.commands._base import PropGroup
from propbind.commands._context import AppContext
from propbind.config.settings import PropbindSettings


@click.group(
    cls=PropGroup,
    invoke_without_command=True,
    examples="""\
  propbind show app.cfg --model myapp.config:AppConfig
  propbind --json check app.cfg --model myapp.config:AppConfig
  propbind --comment ';' --no-trim show app.ini -m myapp.config:AppConfig""",
)
@click.version_option(version=__version__, prog_name="propbind")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--comment", default=None, help="Comment prefix in settings files (default '#').")
@click.option("--trim/--no-trim", default=None, help="Strip whitespace around values (default on).")
@click.option("--no-plugins", "no_plugins", is_flag=True, help="Skip converter plugin discovery.")
@click.option("-c", "--config", "config_path", default=None, help="Override pyproject.toml path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    comment: str | None,
    trim: bool | None,
    no_plugins: bool,
    config_path: str | None,
) -> None:
    """propbind — bind key=value settings files onto typed configs.

    Flags left unset fall back to PROPBIND_* env vars, then to the
    [tool.propbind] table of the nearest pyproject.toml.
    """
    ctx.ensure_object(dict)
    settings = PropbindSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        verbose=verbose or None,
        log_json=log_json or None,
        comment=comment,
        trim=trim,
        plugins=False if no_plugins else None,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
