"""Tests for the layout engine: stacked and packed strategies."""

from __future__ import annotations

import itertools

import pytest

from spritegen.domain.errors import InvalidDimension
from spritegen.domain.images import Layout
from spritegen.domain.layout import (
    BUILTIN_LAYOUTS,
    horizontal,
    layout,
    packed,
    packing_width,
    scale_dimension,
    vertical,
)
from spritegen.domain.options import LayoutOptions
from tests.conftest import descriptor

A = descriptor("a.png", 10, 20)
B = descriptor("b.png", 10, 30)


def _positions(result: Layout) -> list[tuple[int, int]]:
    return [(image.x, image.y) for image in result.images]


def _assert_valid(result: Layout, padding: int) -> None:
    """Boxes stay inside the sprite with at least *padding* between them."""
    for image in result.images:
        assert image.x >= padding
        assert image.y >= padding
        assert image.right + padding <= result.width
        assert image.bottom + padding <= result.height
    for first, second in itertools.combinations(result.images, 2):
        apart = (
            first.right + padding <= second.x
            or second.right + padding <= first.x
            or first.bottom + padding <= second.y
            or second.bottom + padding <= first.y
        )
        assert apart, f"{first.identifier} and {second.identifier} overlap"


class TestVertical:
    def test_stacks_without_padding(self) -> None:
        result = vertical([A, B], LayoutOptions())
        assert (result.width, result.height) == (10, 50)
        assert _positions(result) == [(0, 0), (0, 20)]

    def test_padding_surrounds_every_image(self) -> None:
        result = vertical([A, B], LayoutOptions(padding=5))
        assert (result.width, result.height) == (20, 65)
        assert _positions(result) == [(5, 5), (5, 30)]
        _assert_valid(result, 5)

    def test_left_aligned_with_mixed_widths(self) -> None:
        wide = descriptor("wide.png", 40, 5)
        result = vertical([A, wide], LayoutOptions())
        assert result.width == 40
        assert [image.x for image in result.images] == [0, 0]


class TestHorizontal:
    def test_stacks_with_padding(self) -> None:
        result = horizontal([A, B], LayoutOptions(padding=5))
        assert (result.width, result.height) == (35, 40)
        assert _positions(result) == [(5, 5), (20, 5)]

    def test_top_aligned(self) -> None:
        result = horizontal([A, B], LayoutOptions())
        assert [image.y for image in result.images] == [0, 0]
        assert result.height == 30


class TestPacked:
    def test_tallest_first_on_one_shelf(self) -> None:
        result = packed([A, B], LayoutOptions())
        # b is taller so it opens the shelf; a fits beside it.
        assert _positions(result) == [(10, 0), (0, 0)]
        assert (result.width, result.height) == (20, 30)

    def test_equal_squares_form_a_grid(self) -> None:
        squares = [descriptor(f"{i}.png", 10, 10) for i in range(4)]
        result = packed(squares, LayoutOptions())
        assert (result.width, result.height) == (20, 20)
        assert _positions(result) == [(0, 0), (10, 0), (0, 10), (10, 10)]

    def test_padding_and_containment(self) -> None:
        images = [
            descriptor(f"{i}.png", w, h)
            for i, (w, h) in enumerate([(16, 16), (32, 8), (8, 24), (12, 12), (5, 40), (20, 3)])
        ]
        result = packed(images, LayoutOptions(padding=3))
        _assert_valid(result, 3)

    def test_deterministic(self) -> None:
        images = [descriptor(f"{i}.png", 7 + i % 3, 9 + i % 4) for i in range(12)]
        first = packed(images, LayoutOptions(padding=2))
        second = packed(images, LayoutOptions(padding=2))
        assert first == second

    def test_images_keep_input_order(self) -> None:
        images = [descriptor(f"{i}.png", 5 + i, 30 - i) for i in range(6)]
        result = packed(images, LayoutOptions())
        assert [image.identifier for image in result.images] == [i.identifier for i in images]
        assert [image.index for image in result.images] == list(range(6))

    def test_packing_width_fits_widest_image(self) -> None:
        assert packing_width([(100, 1), (1, 1)], 0) == 100
        assert packing_width([(10, 10)] * 4, 0) == 20


@pytest.mark.parametrize("strategy", sorted(BUILTIN_LAYOUTS))
class TestAllStrategies:
    def test_empty_input_is_zero_sized(self, strategy: str) -> None:
        result = layout([], LayoutOptions(padding=10), strategy=strategy)
        assert (result.width, result.height) == (0, 0)
        assert result.images == ()

    def test_single_image(self, strategy: str) -> None:
        result = layout([A], LayoutOptions(padding=4), strategy=strategy)
        assert (result.width, result.height) == (18, 28)
        assert _positions(result) == [(4, 4)]

    def test_no_overlap(self, strategy: str) -> None:
        images = [descriptor(f"{i}.png", 3 + i * 2, 11 - i) for i in range(8)]
        _assert_valid(layout(images, LayoutOptions(padding=2), strategy=strategy), 2)

    def test_scaling_rounds_half_up(self, strategy: str) -> None:
        result = layout([descriptor("x.png", 15, 5)], LayoutOptions(scaling=0.5), strategy=strategy)
        image = result.images[0]
        assert (image.width, image.height) == (8, 3)

    @pytest.mark.parametrize("factor", [0.5, 1.5, 2.0, 3.0])
    def test_scaling_matches_prescaled_images(self, strategy: str, factor: float) -> None:
        sizes = [(10, 20), (7, 30), (15, 5), (9, 9), (21, 13)]
        images = [descriptor(f"{i}.png", w, h) for i, (w, h) in enumerate(sizes)]
        prescaled = [
            descriptor(f"{i}.png", scale_dimension(w, factor), scale_dimension(h, factor))
            for i, (w, h) in enumerate(sizes)
        ]

        scaled = layout(images, LayoutOptions(padding=3, scaling=factor), strategy=strategy)
        direct = layout(prescaled, LayoutOptions(padding=3), strategy=strategy)

        assert (scaled.width, scaled.height) == (direct.width, direct.height)
        assert _positions(scaled) == _positions(direct)
        assert [(i.width, i.height) for i in scaled.images] == [
            (i.width, i.height) for i in direct.images
        ]

    def test_rejects_zero_sized_image(self, strategy: str) -> None:
        with pytest.raises(InvalidDimension):
            layout([descriptor("empty.png", 0, 10)], strategy=strategy)

    def test_rejects_image_scaled_to_nothing(self, strategy: str) -> None:
        with pytest.raises(InvalidDimension):
            layout([descriptor("tiny.png", 1, 1)], LayoutOptions(scaling=0.1), strategy=strategy)


class TestHelpers:
    def test_scale_dimension(self) -> None:
        assert scale_dimension(10, 1.0) == 10
        assert scale_dimension(15, 0.5) == 8
        assert scale_dimension(10, 1.25) == 13

    def test_unknown_strategy(self) -> None:
        with pytest.raises(ValueError, match="diagonal"):
            layout([A], strategy="diagonal")

    def test_options_reject_negative_padding(self) -> None:
        with pytest.raises(ValueError):
            LayoutOptions(padding=-1)

    def test_layout_iterates_placed_images(self) -> None:
        result = vertical([A, B], LayoutOptions())
        assert [image.identifier for image in result] == ["a.png", "b.png"]
