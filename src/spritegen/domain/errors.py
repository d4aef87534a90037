"""Typed failures raised by the build pipeline.

Every error carries a stable ``code`` that the service layer copies into
:class:`~spritegen.services.result.ServiceError` for structured output.
"""

from __future__ import annotations


class SpriteError(Exception):
    """Base class for all spritegen failures."""

    code = "SPRITE_ERROR"


class SourceResolutionError(SpriteError):
    """A source pattern matched nothing or a source file could not be read."""

    code = "SOURCE_RESOLUTION"


class InvalidDimension(SpriteError, ValueError):
    """An image has a zero or negative width/height (before or after scaling)."""

    code = "INVALID_DIMENSION"


class RenderError(SpriteError):
    """The compositor failed to read an image or produce sprite bytes."""

    code = "RENDER_FAILED"


class StylesheetError(SpriteError):
    """The stylesheet adapter failed to produce text."""

    code = "STYLESHEET_FAILED"


class LayoutError(SpriteError):
    """A layout function failed for a reason other than a bad dimension."""

    code = "LAYOUT_FAILED"


class PersistenceError(SpriteError):
    """Creating an output directory or writing an output file failed."""

    code = "PERSISTENCE_FAILED"


class UnknownAdapterError(SpriteError, LookupError):
    """A compositor, layout, or stylesheet name is not registered."""

    code = "UNKNOWN_ADAPTER"
