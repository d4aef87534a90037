"""Per-stage option models with code-baked defaults.

Callers pass sparse dicts; the pipeline merges them over these defaults.
"""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, Field

from spritegen.domain.naming import name_to_class
from spritegen.domain.types import PngFilter


class LayoutOptions(BaseModel):
    """Placement options shared by all layout strategies."""

    model_config = {"frozen": True}

    padding: int = Field(default=0, ge=0)
    scaling: float = Field(default=1.0, gt=0)


class CompositorOptions(BaseModel):
    """Encoding options for the sprite image."""

    model_config = {"frozen": True}

    filter: PngFilter = PngFilter.ALL
    compression_level: int = Field(default=6, ge=0, le=9)


class StylesheetOptions(BaseModel):
    """Options handed to stylesheet adapters.

    Attributes:
        prefix: Prepended to every generated class name.
        name_mapping: Maps an image identifier to a class name.
        sprite_path: Sprite reference written into the stylesheet. When None
            and both output paths are known, the pipeline fills in the
            sprite's path relative to the stylesheet.
        pixel_ratio: Divisor applied to every coordinate and dimension.
    """

    model_config = {"frozen": True}

    prefix: str = ""
    name_mapping: Callable[[str], str] = name_to_class
    sprite_path: str | None = None
    pixel_ratio: float = Field(default=1.0, gt=0)
