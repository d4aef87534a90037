"""In-process compositor backed by Pillow (the default)."""

from __future__ import annotations

import asyncio
import io
import logging

from PIL import Image, UnidentifiedImageError

from spritegen.domain.errors import RenderError
from spritegen.domain.images import ImageDescriptor, Layout, RawImage
from spritegen.domain.options import CompositorOptions

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def _measure(raw: RawImage) -> ImageDescriptor:
    try:
        with Image.open(io.BytesIO(raw.data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError) as exc:
        msg = f"Cannot decode image {raw.path}: {exc}"
        raise RenderError(msg) from exc
    return ImageDescriptor(identifier=raw.path, data=raw.data, width=width, height=height)


def _composite(layout: Layout, options: CompositorOptions) -> bytes:
    if layout.width <= 0 or layout.height <= 0:
        msg = f"Cannot render an empty {layout.width}x{layout.height} sprite"
        raise RenderError(msg)

    sprite = Image.new("RGBA", (layout.width, layout.height), TRANSPARENT)
    for placed in layout.images:
        try:
            with Image.open(io.BytesIO(placed.data)) as src:
                tile = src.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            msg = f"Cannot decode image {placed.identifier}: {exc}"
            raise RenderError(msg) from exc
        if tile.size != (placed.width, placed.height):
            tile = tile.resize((placed.width, placed.height), Image.LANCZOS)
        sprite.paste(tile, (placed.x, placed.y))

    buffer = io.BytesIO()
    # Pillow always picks row filters adaptively; only the zlib level is tunable.
    sprite.save(buffer, "PNG", compress_level=options.compression_level)
    sprite.close()
    return buffer.getvalue()


class PillowCompositor:
    """Decode and composite with Pillow in a worker thread."""

    name = "pillow"

    async def read_image(self, raw: RawImage) -> ImageDescriptor:
        return await asyncio.to_thread(_measure, raw)

    async def render(self, layout: Layout, options: CompositorOptions) -> bytes:
        logger.debug(
            "Compositing %d images into %dx%d sprite",
            len(layout.images),
            layout.width,
            layout.height,
        )
        return await asyncio.to_thread(_composite, layout, options)
