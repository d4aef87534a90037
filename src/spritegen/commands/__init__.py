"""Subcommand modules for spritegen.

register_commands() imports each command lazily so ``spritegen --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from spritegen.commands.build import build
    from spritegen.commands.layouts import layouts

    cli.add_command(build)
    cli.add_command(layouts)
