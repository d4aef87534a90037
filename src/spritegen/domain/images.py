"""Image records flowing through the pipeline.

``RawImage`` comes out of source resolution, ``ImageDescriptor`` out of a
compositor's ``read_image`` step, and ``PlacedImage``/``Layout`` out of the
layout engine. All of them are frozen; adapters only ever read them.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawImage:
    """A source image before its dimensions are known."""

    path: str
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class ImageDescriptor:
    """A source image with its pixel dimensions.

    ``identifier`` is the source path; stylesheet class names are derived
    from it, so it should be stable between builds.
    """

    identifier: str
    data: bytes = field(repr=False)
    width: int
    height: int


@dataclass(frozen=True)
class PlacedImage(ImageDescriptor):
    """An image positioned inside the sprite.

    ``width``/``height`` are the scaled dimensions the image occupies in the
    sprite. ``index`` is the image's position in the layout input.
    """

    x: int = 0
    y: int = 0
    index: int = 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass(frozen=True)
class Layout:
    """Placement of every image plus the overall sprite size.

    ``images`` is always in input order, whatever the strategy.
    """

    width: int
    height: int
    images: tuple[PlacedImage, ...] = ()

    def __iter__(self) -> Iterator[PlacedImage]:
        return iter(self.images)
