"""Compositors: image decoding and sprite rendering adapters."""

from spritegen.compositors.base import Compositor
from spritegen.compositors.gm import GraphicsMagickCompositor
from spritegen.compositors.pillow import PillowCompositor

BUILTIN_COMPOSITORS: dict[str, Compositor] = {
    "pillow": PillowCompositor(),
    "gm": GraphicsMagickCompositor(),
}

__all__ = [
    "BUILTIN_COMPOSITORS",
    "Compositor",
    "GraphicsMagickCompositor",
    "PillowCompositor",
]
