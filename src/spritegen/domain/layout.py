"""Layout engine: places sized images inside one bounding rectangle.

Three strategies are provided:

- ``vertical``: images stacked top to bottom, left aligned.
- ``horizontal``: images stacked left to right, top aligned.
- ``packed``: shelf packing (an approximation, not optimal bin packing).

All strategies scale first (round half up) and then enforce ``padding`` as
the minimum gap between any two boxes and between any box and the sprite
edge. An empty input always yields a 0x0 layout.

INVARIANT: Every strategy is a pure function of its inputs and returns
``images`` in input order.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from spritegen.domain.errors import InvalidDimension
from spritegen.domain.images import ImageDescriptor, Layout, PlacedImage
from spritegen.domain.options import LayoutOptions
from spritegen.domain.types import LayoutStrategy


LayoutFunction = Callable[[Sequence[ImageDescriptor], LayoutOptions], Layout]


def scale_dimension(value: int, scaling: float) -> int:
    """Scale a pixel dimension, rounding half up.

    Examples:
        >>> scale_dimension(15, 0.5)
        8
        >>> scale_dimension(10, 1.25)
        13
    """
    return math.floor(value * scaling + 0.5)


def _scaled_sizes(
    images: Sequence[ImageDescriptor], options: LayoutOptions
) -> list[tuple[int, int]]:
    sizes: list[tuple[int, int]] = []
    for image in images:
        if image.width <= 0 or image.height <= 0:
            msg = f"{image.identifier}: invalid size {image.width}x{image.height}"
            raise InvalidDimension(msg)
        width = scale_dimension(image.width, options.scaling)
        height = scale_dimension(image.height, options.scaling)
        if width <= 0 or height <= 0:
            msg = (
                f"{image.identifier}: size {image.width}x{image.height} "
                f"scales to {width}x{height} at {options.scaling}"
            )
            raise InvalidDimension(msg)
        sizes.append((width, height))
    return sizes


def _place(
    image: ImageDescriptor, index: int, x: int, y: int, size: tuple[int, int]
) -> PlacedImage:
    return PlacedImage(
        identifier=image.identifier,
        data=image.data,
        width=size[0],
        height=size[1],
        x=x,
        y=y,
        index=index,
    )


# ---------------------------------------------------------------------------
# Stacked strategies
# ---------------------------------------------------------------------------


def vertical(images: Sequence[ImageDescriptor], options: LayoutOptions) -> Layout:
    """Stack images top to bottom in input order."""
    sizes = _scaled_sizes(images, options)
    if not sizes:
        return Layout(width=0, height=0)

    pad = options.padding
    placed: list[PlacedImage] = []
    y = pad
    for index, (image, size) in enumerate(zip(images, sizes, strict=True)):
        placed.append(_place(image, index, pad, y, size))
        y += size[1] + pad

    width = 2 * pad + max(w for w, _h in sizes)
    return Layout(width=width, height=y, images=tuple(placed))


def horizontal(images: Sequence[ImageDescriptor], options: LayoutOptions) -> Layout:
    """Stack images left to right in input order."""
    sizes = _scaled_sizes(images, options)
    if not sizes:
        return Layout(width=0, height=0)

    pad = options.padding
    placed: list[PlacedImage] = []
    x = pad
    for index, (image, size) in enumerate(zip(images, sizes, strict=True)):
        placed.append(_place(image, index, x, pad, size))
        x += size[0] + pad

    height = 2 * pad + max(h for _w, h in sizes)
    return Layout(width=x, height=height, images=tuple(placed))


# ---------------------------------------------------------------------------
# Packed strategy
# ---------------------------------------------------------------------------


@dataclass
class _Shelf:
    """A horizontal band; ``cursor`` is the next free x (padding included)."""

    y: int
    height: int
    cursor: int


def packing_width(sizes: Sequence[tuple[int, int]], padding: int) -> int:
    """Target content width for shelf packing.

    The widest image must fit; beyond that the width approximates the
    side of a square holding every padded box.
    """
    area = sum((w + padding) * (h + padding) for w, h in sizes)
    return max(max(w for w, _h in sizes), math.ceil(math.sqrt(area)))


def packed(images: Sequence[ImageDescriptor], options: LayoutOptions) -> Layout:
    """Shelf-pack images into a near-square sprite.

    Images are visited by descending height, then descending width, then
    input index, so the output is reproducible. Each image goes on the
    first shelf with room left; otherwise a new shelf opens below the last.
    """
    sizes = _scaled_sizes(images, options)
    if not sizes:
        return Layout(width=0, height=0)

    pad = options.padding
    limit = pad + packing_width(sizes, pad)
    order = sorted(range(len(sizes)), key=lambda i: (-sizes[i][1], -sizes[i][0], i))

    shelves: list[_Shelf] = []
    positions: dict[int, tuple[int, int]] = {}
    for index in order:
        width, height = sizes[index]
        shelf = next((s for s in shelves if s.cursor + width <= limit), None)
        if shelf is None:
            y = shelves[-1].y + shelves[-1].height + pad if shelves else pad
            # Visiting by descending height makes the opening image the tallest.
            shelf = _Shelf(y=y, height=height, cursor=pad)
            shelves.append(shelf)
        positions[index] = (shelf.cursor, shelf.y)
        shelf.cursor += width + pad

    placed = tuple(
        _place(image, index, *positions[index], sizes[index])
        for index, image in enumerate(images)
    )
    width = max(s.cursor for s in shelves)
    height = shelves[-1].y + shelves[-1].height + pad
    return Layout(width=width, height=height, images=placed)


BUILTIN_LAYOUTS: dict[str, LayoutFunction] = {
    LayoutStrategy.VERTICAL: vertical,
    LayoutStrategy.HORIZONTAL: horizontal,
    LayoutStrategy.PACKED: packed,
}


def layout(
    images: Sequence[ImageDescriptor],
    options: LayoutOptions | None = None,
    *,
    strategy: str = LayoutStrategy.VERTICAL,
) -> Layout:
    """Lay out *images* with a built-in *strategy*."""
    try:
        fn = BUILTIN_LAYOUTS[strategy]
    except KeyError:
        msg = f"Unknown layout strategy: {strategy!r}"
        raise ValueError(msg) from None
    return fn(images, options or LayoutOptions())
