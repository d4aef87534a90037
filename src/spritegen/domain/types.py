"""Built-in adapter names and option enums."""

from __future__ import annotations

from enum import StrEnum


class LayoutStrategy(StrEnum):
    """Built-in placement strategies."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    PACKED = "packed"


class CompositorName(StrEnum):
    """Built-in compositors."""

    PILLOW = "pillow"
    GM = "gm"


class StylesheetFormat(StrEnum):
    """Built-in stylesheet templates."""

    CSS = "css"
    SCSS = "scss"
    SASS = "sass"
    LESS = "less"
    STYLUS = "stylus"


class PngFilter(StrEnum):
    """PNG row filter selection passed through to compositors."""

    NONE = "none"
    SUB = "sub"
    UP = "up"
    AVERAGE = "average"
    PAETH = "paeth"
    ALL = "all"


# GraphicsMagick encodes the filter in the last digit of ``-quality``.
PNG_FILTER_CODES: dict[PngFilter, int] = {
    PngFilter.NONE: 0,
    PngFilter.SUB: 1,
    PngFilter.UP: 2,
    PngFilter.AVERAGE: 3,
    PngFilter.PAETH: 4,
    PngFilter.ALL: 9,
}
