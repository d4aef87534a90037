"""Build pipeline: sources to sprite image plus stylesheet.

Pipeline: RESOLVE → READ → LAYOUT → SPRITE PATH → RENDER → STYLESHEET →
PERSIST SPRITE → PERSIST STYLESHEET → RESPOND

Stages run strictly in sequence; the first failure aborts the rest and
propagates as a typed :class:`~spritegen.domain.errors.SpriteError`. No
partial result is ever returned. Directories created before a failure are
left in place.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel, Field, field_validator

from spritegen.compositors.base import Compositor
from spritegen.config.logging import build_log_context
from spritegen.domain.errors import LayoutError, RenderError, SpriteError, StylesheetError
from spritegen.domain.images import ImageDescriptor, Layout, RawImage
from spritegen.domain.layout import LayoutFunction
from spritegen.domain.options import CompositorOptions, LayoutOptions, StylesheetOptions
from spritegen.domain.types import CompositorName, LayoutStrategy, StylesheetFormat
from spritegen.infrastructure.filesystem import persist, relative_sprite_path
from spritegen.infrastructure.sources import resolve_sources
from spritegen.registry import AdapterRegistry, default_registry
from spritegen.services.telemetry import root_span, trace_span
from spritegen.stylesheets.base import Stylesheet

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class BuildConfig(BaseModel):
    """Everything one build needs.

    ``compositor``, ``layout`` and ``stylesheet`` take a registered name or
    an adapter object; a stylesheet string that is not a registered name is
    used as an inline Jinja2 template. Option groups accept sparse dicts
    merged over the defaults.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    src: list[Any] = Field(default_factory=list)
    compositor: Any = CompositorName.PILLOW.value
    layout: Any = LayoutStrategy.VERTICAL.value
    stylesheet: Any = StylesheetFormat.STYLUS.value
    sprite_path: Path | None = None
    stylesheet_path: Path | None = None
    compositor_options: CompositorOptions = Field(default_factory=CompositorOptions)
    layout_options: LayoutOptions = Field(default_factory=LayoutOptions)
    stylesheet_options: StylesheetOptions = Field(default_factory=StylesheetOptions)

    @field_validator("src", mode="before")
    @classmethod
    def _wrap_single_source(cls, value: Any) -> Any:
        if isinstance(value, (str, Path, RawImage, Mapping)):
            return [value]
        return list(value)

    @classmethod
    def coerce(cls, config: BuildConfig | Mapping[str, Any]) -> BuildConfig:
        if isinstance(config, BuildConfig):
            return config
        return cls.model_validate(dict(config))


class BuildResult(NamedTuple):
    """Stylesheet text first, sprite bytes second."""

    stylesheet: str
    sprite: bytes


@dataclass(frozen=True)
class BuildPlan:
    """A configuration with every adapter selection resolved."""

    config: BuildConfig
    compositor: Compositor
    layout: LayoutFunction
    stylesheet: Stylesheet
    registry: AdapterRegistry

    @classmethod
    def resolve(cls, config: BuildConfig, registry: AdapterRegistry | None = None) -> BuildPlan:
        """Resolve adapter names; raises UnknownAdapterError for unknown names."""
        registry = registry or default_registry()
        return cls(
            config=config,
            compositor=registry.compositor(config.compositor),
            layout=registry.layout(config.layout),
            stylesheet=registry.stylesheet(config.stylesheet),
            registry=registry,
        )


@dataclass(frozen=True)
class PipelineRun:
    """What a finished build produced, including the layout it used."""

    result: BuildResult
    layout: Layout


def stylesheet_options_for(config: BuildConfig) -> StylesheetOptions:
    """Stylesheet options with the sprite reference filled in.

    When both output paths are known and ``sprite_path`` was not set
    explicitly, the stylesheet references the sprite relative to its own
    directory.
    """
    options = config.stylesheet_options
    explicit = "sprite_path" in options.model_fields_set
    if explicit or config.sprite_path is None or config.stylesheet_path is None:
        return options
    return options.model_copy(
        update={"sprite_path": relative_sprite_path(config.sprite_path, config.stylesheet_path)}
    )


async def _guarded(
    call: Callable[[], Awaitable[_T]],
    error_cls: type[SpriteError],
    stage: str,
) -> _T:
    """Run an adapter call, wrapping foreign exceptions in *error_cls*."""
    try:
        return await call()
    except SpriteError:
        raise
    except Exception as exc:
        msg = f"{stage} failed: {exc}"
        raise error_cls(msg) from exc


async def read_images(compositor: Compositor, raws: Sequence[RawImage]) -> list[ImageDescriptor]:
    """Measure every image; results keep input order."""

    async def read_all() -> list[ImageDescriptor]:
        return list(await asyncio.gather(*(compositor.read_image(raw) for raw in raws)))

    return await _guarded(read_all, RenderError, "read_image")


async def apply_layout(
    fn: LayoutFunction, images: Sequence[ImageDescriptor], options: LayoutOptions
) -> Layout:
    """Call a layout function, awaiting it if a plugin made it async."""

    async def call() -> Layout:
        layout = fn(images, options)
        if inspect.isawaitable(layout):
            layout = await layout
        return layout

    return await _guarded(call, LayoutError, "layout")


async def run_pipeline(
    config: BuildConfig | Mapping[str, Any],
    *,
    registry: AdapterRegistry | None = None,
) -> PipelineRun:
    """Run every stage and return the result together with its layout."""
    config = BuildConfig.coerce(config)
    plan = BuildPlan.resolve(config, registry)
    sprite_path, stylesheet_path = config.sprite_path, config.stylesheet_path

    with (
        build_log_context(sprite_path=str(sprite_path), stylesheet_path=str(stylesheet_path)),
        root_span("build") as root,
    ):
        with trace_span("resolve_sources") as span:
            raws = await resolve_sources(config.src)
            if span:
                span.annotate("sources", len(raws))

        with trace_span("read_images"):
            images = await read_images(plan.compositor, raws)

        with trace_span("layout") as span:
            layout = await apply_layout(plan.layout, images, config.layout_options)
            if span:
                span.annotate("size", f"{layout.width}x{layout.height}")
        logger.debug("Laid out %d images in %dx%d", len(layout.images), layout.width, layout.height)

        stylesheet_options = stylesheet_options_for(config)

        with trace_span("render"):
            sprite = await _guarded(
                lambda: plan.compositor.render(layout, config.compositor_options),
                RenderError,
                "render",
            )

        with trace_span("stylesheet"):
            stylesheet = await _guarded(
                lambda: plan.stylesheet.render(layout, stylesheet_options),
                StylesheetError,
                "stylesheet",
            )

        with trace_span("persist"):
            if sprite_path is not None:
                await persist(sprite_path, sprite)
                logger.debug("Wrote sprite (%d bytes)", len(sprite))
            if stylesheet_path is not None:
                await persist(stylesheet_path, stylesheet)
                logger.debug("Wrote stylesheet (%d chars)", len(stylesheet))

        if root:
            root.annotate("images", len(layout.images))

    if plan.registry.plugin_manager is not None:
        plan.registry.plugin_manager.notify_build(
            sprite_path=str(sprite_path) if sprite_path else None,
            stylesheet_path=str(stylesheet_path) if stylesheet_path else None,
            image_count=len(layout.images),
        )
    return PipelineRun(result=BuildResult(stylesheet, sprite), layout=layout)


async def build(
    config: BuildConfig | Mapping[str, Any],
    *,
    registry: AdapterRegistry | None = None,
) -> BuildResult:
    """Build the sprite and stylesheet for *config*.

    Returns ``(stylesheet, sprite)`` whether or not output paths were given;
    when they are, both files are written as a side effect.
    """
    run = await run_pipeline(config, registry=registry)
    return run.result


async def generate(
    config: BuildConfig | Mapping[str, Any] | None = None,
    /,
    **options: Any,
) -> BuildResult:
    """Convenience entry point: ``await generate(src=[...], sprite_path=...)``."""
    if config is None:
        config = options
    elif options:
        config = {**BuildConfig.coerce(config).model_dump(exclude_unset=True), **options}
    return await build(config)
