"""Pluggy hook specifications for spritegen adapters and build events.

Three setup-time hooks let plugins contribute named compositors, layout
strategies, and stylesheet adapters. One lifecycle hook fires after every
successful build.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from spritegen.compositors.base import Compositor
    from spritegen.domain.layout import LayoutFunction
    from spritegen.stylesheets.base import Stylesheet

hookspec = pluggy.HookspecMarker("spritegen")
hookimpl = pluggy.HookimplMarker("spritegen")


class SpritegenHookSpec:
    """Hook specifications for the spritegen plugin system."""

    @hookspec
    def register_compositors(self) -> dict[str, Compositor] | None:
        """Return name -> compositor mappings."""

    @hookspec
    def register_layouts(self) -> dict[str, LayoutFunction] | None:
        """Return name -> layout function mappings."""

    @hookspec
    def register_stylesheets(self) -> dict[str, Stylesheet] | None:
        """Return name -> stylesheet adapter mappings."""

    @hookspec
    def post_build(
        self,
        sprite_path: str | None,
        stylesheet_path: str | None,
        image_count: int,
    ) -> None:
        """Called after a build completes and its outputs are written."""
