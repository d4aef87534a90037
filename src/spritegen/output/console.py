"""Rich Console factory and theme for spritegen output.

Consoles render to a StringIO buffer so every formatter returns a plain
``str``. In non-TTY environments (tests, pipes) Rich drops color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SPRITE_THEME = Theme(
    {
        "sprite.ok": "bold green",
        "sprite.error": "bold red",
        "sprite.warning": "bold yellow",
        "sprite.op": "bold cyan",
        "sprite.key": "dim",
        "sprite.path": "dim",
        "sprite.class": "bold blue",
        "sprite.coord": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SPRITE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
