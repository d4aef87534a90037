"""The compositor capability consumed by the pipeline."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from spritegen.domain.images import ImageDescriptor, Layout, RawImage
from spritegen.domain.options import CompositorOptions


@runtime_checkable
class Compositor(Protocol):
    """Reads image dimensions and renders a layout into sprite bytes.

    Both methods may suspend; blocking work belongs in a worker thread.
    """

    async def read_image(self, raw: RawImage) -> ImageDescriptor:
        """Return *raw* with its pixel width and height filled in."""
        ...

    async def render(self, layout: Layout, options: CompositorOptions) -> bytes:
        """Composite every placed image and return the encoded sprite."""
        ...
