"""Stylesheet adapters: packaged templates, template strings, callables.

Every adapter renders the same template context built by
:func:`build_context`, so custom templates see exactly what the built-in
ones see.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from functools import cached_property
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from jinja2 import Environment, Template, TemplateError

from spritegen.domain.errors import StylesheetError
from spritegen.domain.images import Layout
from spritegen.domain.options import StylesheetOptions
from spritegen.infrastructure.templates import TEMPLATE_SUFFIX, build_template_environment

TEMPLATE_GROUP = "stylesheets"

StylesheetFunction = Callable[[Layout, StylesheetOptions], str | Awaitable[str]]


@runtime_checkable
class Stylesheet(Protocol):
    """Turns a layout into stylesheet text."""

    async def render(self, layout: Layout, options: StylesheetOptions) -> str: ...


def build_context(layout: Layout, options: StylesheetOptions) -> dict[str, Any]:
    """Template variables for *layout*.

    Every coordinate and dimension is divided by ``options.pixel_ratio``;
    templates print them through the ``px`` filter.
    """
    ratio = options.pixel_ratio
    images = [
        {
            "identifier": image.identifier,
            "class_name": f"{options.prefix}{options.name_mapping(image.identifier)}",
            "index": image.index,
            "x": image.x / ratio,
            "y": image.y / ratio,
            "width": image.width / ratio,
            "height": image.height / ratio,
        }
        for image in layout.images
    ]
    return {
        "images": images,
        "prefix": options.prefix,
        "sprite_path": options.sprite_path or "",
        "pixel_ratio": ratio,
        "width": layout.width / ratio,
        "height": layout.height / ratio,
    }


def _environment(override_dirs: Sequence[Path]) -> Environment:
    env = build_template_environment(TEMPLATE_GROUP, override_dirs=override_dirs)
    env.trim_blocks = True
    env.lstrip_blocks = True
    return env


class TemplateStylesheet:
    """Render a named packaged template or an inline template string.

    Exactly one of *name* and *source* must be given.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        source: str | None = None,
        override_dirs: Sequence[Path] = (),
    ) -> None:
        if (name is None) == (source is None):
            msg = "TemplateStylesheet needs exactly one of name or source"
            raise ValueError(msg)
        self.name = name
        self.source = source
        self._override_dirs = tuple(override_dirs)

    @cached_property
    def template(self) -> Template:
        env = _environment(self._override_dirs)
        try:
            if self.source is not None:
                return env.from_string(self.source)
            return env.get_template(f"{self.name}{TEMPLATE_SUFFIX}")
        except TemplateError as exc:
            msg = f"Cannot load stylesheet template {self.name or '<inline>'}: {exc}"
            raise StylesheetError(msg) from exc

    async def render(self, layout: Layout, options: StylesheetOptions) -> str:
        template = self.template
        try:
            return template.render(build_context(layout, options))
        except TemplateError as exc:
            msg = f"Stylesheet template {self.name or '<inline>'} failed: {exc}"
            raise StylesheetError(msg) from exc

    def __repr__(self) -> str:
        return f"TemplateStylesheet({self.name or '<inline>'})"


class CallableStylesheet:
    """Adapt a plain ``(layout, options) -> str`` function (sync or async)."""

    def __init__(self, fn: StylesheetFunction) -> None:
        self.fn = fn
        self.name = getattr(fn, "__qualname__", repr(fn))

    async def render(self, layout: Layout, options: StylesheetOptions) -> str:
        result = self.fn(layout, options)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, str):
            msg = f"Stylesheet function {self.name} returned {type(result).__name__}, not str"
            raise StylesheetError(msg)
        return result
