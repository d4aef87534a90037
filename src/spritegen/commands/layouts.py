"""Command: list registered compositors, layouts, and stylesheets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from spritegen.commands._base import SpriteCommand

if TYPE_CHECKING:
    from spritegen.commands._context import AppContext


@click.command(
    cls=SpriteCommand,
    examples="""\
  spritegen layouts
  spritegen --json layouts""",
)
@click.pass_obj
def layouts(app: AppContext) -> None:
    """List every adapter name a build can select, plugins included."""
    app.emit(app.service.list_adapters())
