"""Stylesheet class-name derivation from image identifiers."""

from __future__ import annotations

import re
from pathlib import PurePath

_INVALID_CLASS_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def name_to_class(identifier: str) -> str:
    """Default name mapping: file stem with unsafe characters replaced.

    Examples:
        >>> name_to_class("/images/icons/arrow-left.png")
        'arrow-left'
        >>> name_to_class("flags/en gb@2x.png")
        'en-gb-2x'
    """
    stem = PurePath(identifier).stem
    return _INVALID_CLASS_CHARS.sub("-", stem)


def format_px(value: float) -> str:
    """Render a pixel value with at most 4 decimals and no trailing zeros.

    Examples:
        >>> format_px(12)
        '12'
        >>> format_px(7.5)
        '7.5'
        >>> format_px(10 / 3)
        '3.3333'
    """
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
