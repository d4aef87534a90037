"""Stylesheet adapters and the packaged template formats."""

from spritegen.domain.types import StylesheetFormat
from spritegen.stylesheets.base import (
    CallableStylesheet,
    Stylesheet,
    TemplateStylesheet,
    build_context,
)

BUILTIN_STYLESHEETS: dict[str, Stylesheet] = {
    fmt.value: TemplateStylesheet(fmt.value) for fmt in StylesheetFormat
}

__all__ = [
    "BUILTIN_STYLESHEETS",
    "CallableStylesheet",
    "Stylesheet",
    "TemplateStylesheet",
    "build_context",
]
