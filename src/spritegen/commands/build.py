"""Command: build a sprite and its stylesheet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from spritegen.commands._base import SpriteCommand
from spritegen.domain.types import PngFilter, StylesheetFormat

if TYPE_CHECKING:
    from spritegen.commands._context import AppContext

# CLI flag -> option field, per option group.
_OPTION_FLAGS: dict[str, dict[str, str]] = {
    "layout_options": {"padding": "padding", "scaling": "scaling"},
    "compositor_options": {"filter": "filter", "compression_level": "compression_level"},
    "stylesheet_options": {
        "prefix": "prefix",
        "pixel_ratio": "pixel_ratio",
        "sprite_url": "sprite_path",
    },
}


def _collect_overrides(**values: Any) -> dict[str, Any]:
    """Turn flat CLI values into a sparse BuildConfig override mapping."""
    given = {k: v for k, v in values.items() if v is not None}
    overrides: dict[str, Any] = {}
    for group, keys in _OPTION_FLAGS.items():
        picked = {field: given.pop(flag) for flag, field in keys.items() if flag in given}
        if picked:
            overrides[group] = picked
    overrides.update(given)
    return overrides


@click.command(
    cls=SpriteCommand,
    examples="""\
  spritegen build 'icons/*.png' --sprite public/sprite.png --stylesheet css/sprite.css \\
      --stylesheet-format css
  spritegen build 'icons/**/*.png' --layout packed --padding 2
  spritegen build 'icons/*@2x.png' --pixel-ratio 2 --prefix icon-
  spritegen --json build 'icons/*.png' --compositor gm --filter paeth""",
)
@click.argument("sources", nargs=-1)
@click.option("--sprite", "sprite_path", default=None, help="Where to write the sprite image.")
@click.option(
    "--stylesheet", "stylesheet_path", default=None, help="Where to write the stylesheet."
)
@click.option("--compositor", default=None, help="Compositor name (pillow, gm, or a plugin).")
@click.option("--layout", default=None, help="Layout name (vertical, horizontal, packed, ...).")
@click.option(
    "--stylesheet-format",
    "stylesheet",
    default=None,
    help=f"Stylesheet name ({', '.join(StylesheetFormat)}, or a plugin).",
)
@click.option("--padding", type=click.IntRange(min=0), default=None, help="Pixels around each image.")
@click.option("--scaling", type=float, default=None, help="Scale factor for every image.")
@click.option("--prefix", default=None, help="Prefix for generated class names.")
@click.option("--pixel-ratio", type=float, default=None, help="Divide all CSS values by this.")
@click.option("--sprite-url", default=None, help="Sprite reference written into the stylesheet.")
@click.option(
    "--filter",
    type=click.Choice([f.value for f in PngFilter]),
    default=None,
    help="PNG row filter.",
)
@click.option(
    "--compression-level",
    type=click.IntRange(0, 9),
    default=None,
    help="PNG compression level.",
)
@click.pass_obj
def build(app: AppContext, sources: tuple[str, ...], **options: Any) -> None:
    """Build a sprite sheet and stylesheet from SOURCES (paths or globs).

    Without SOURCES, the ``src`` list from spritegen.toml is used.
    """
    app.emit(app.service.build(sources, _collect_overrides(**options)))
