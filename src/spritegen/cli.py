"""Root CLI group for spritegen with global flags and command registration."""

from __future__ import annotations

import click

from spritegen import __version__
from spritegen.commands import register_commands
from spritegen.commands._base import SpriteGroup
from spritegen.commands._context import AppContext
from spritegen.config.settings import SpriteSettings


@click.group(
    cls=SpriteGroup,
    invoke_without_command=True,
    examples="""\
  spritegen build 'icons/*.png' --sprite sprite.png --stylesheet sprite.styl
  spritegen -v build
  spritegen -c ./config/spritegen.toml build
  spritegen layouts""",
)
@click.version_option(version=__version__, prog_name="spritegen")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with stage timings.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """spritegen: sprite sheet and stylesheet generator."""
    settings = SpriteSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
