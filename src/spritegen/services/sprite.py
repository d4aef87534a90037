"""SpriteService: CLI-facing wrapper around the build pipeline.

Turns settings plus per-invocation overrides into a :class:`BuildConfig`,
runs the pipeline on a fresh event loop, and reports the outcome as a
:class:`ServiceResult` instead of raising.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from spritegen.domain.errors import SpriteError
from spritegen.registry import AdapterRegistry, default_registry
from spritegen.services.pipeline import BuildConfig, PipelineRun, run_pipeline
from spritegen.services.result import ServiceError, ServiceResult
from spritegen.services.telemetry import Span, get_last_span

if TYPE_CHECKING:
    from spritegen.config.settings import SpriteSettings

logger = logging.getLogger(__name__)

_OPTION_GROUPS = ("compositor_options", "layout_options", "stylesheet_options")


class SpriteService:
    """Build sprites from :class:`SpriteSettings` defaults."""

    def __init__(
        self,
        settings: SpriteSettings,
        registry: AdapterRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry

    @property
    def registry(self) -> AdapterRegistry:
        if self._registry is None:
            base = default_registry()
            if self._settings.template_dirs:
                dirs = [self._settings.resolve_path(p) for p in self._settings.template_dirs]
                base = AdapterRegistry(base.plugin_manager, template_dirs=dirs)
            self._registry = base
        return self._registry

    def make_config(
        self,
        sources: Sequence[str] = (),
        overrides: Mapping[str, Any] | None = None,
    ) -> BuildConfig:
        """Merge settings, positional *sources*, and CLI *overrides*.

        Option groups merge key by key, so ``{"layout_options": {"padding": 2}}``
        keeps a configured ``scaling``.
        """
        s = self._settings
        overrides = dict(overrides or {})
        patterns = list(sources) or s.src
        data: dict[str, Any] = {
            "src": [str(s.resolve_path(p)) for p in patterns],
            "compositor": overrides.pop("compositor", None) or s.compositor,
            "layout": overrides.pop("layout", None) or s.layout,
            "stylesheet": overrides.pop("stylesheet", None) or s.stylesheet,
        }
        for key in ("sprite_path", "stylesheet_path"):
            value = overrides.pop(key, None) or getattr(s, key)
            data[key] = s.resolve_path(value) if value is not None else None
        for group in _OPTION_GROUPS:
            base = getattr(s, group).model_dump(exclude_unset=True)
            data[group] = {**base, **overrides.pop(group, {})}
        if overrides:
            msg = f"Unknown build overrides: {sorted(overrides)}"
            raise ValueError(msg)
        return BuildConfig.model_validate(data)

    def build(
        self,
        sources: Sequence[str] = (),
        overrides: Mapping[str, Any] | None = None,
    ) -> ServiceResult:
        """Run one build and describe it."""
        op = "build"
        try:
            config = self.make_config(sources, overrides)
        except (ValidationError, ValueError) as exc:
            return ServiceResult(
                ok=False, op=op, error=ServiceError(code="INVALID_CONFIG", message=str(exc))
            )

        if not config.src:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code="NO_SOURCES", message="No source images given"),
            )

        try:
            run, span = asyncio.run(self._run(config))
        except SpriteError as exc:
            logger.debug("Build failed", exc_info=True)
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))

        return ServiceResult(
            ok=True,
            op=op,
            data=self._describe(config, run),
            meta={"telemetry": span.to_dict()} if span else None,
        )

    async def _run(self, config: BuildConfig) -> tuple[PipelineRun, Span | None]:
        run = await run_pipeline(config, registry=self.registry)
        return run, get_last_span()

    @staticmethod
    def _describe(config: BuildConfig, run: PipelineRun) -> dict[str, Any]:
        layout = run.layout
        return {
            "sprite_path": str(config.sprite_path) if config.sprite_path else None,
            "stylesheet_path": str(config.stylesheet_path) if config.stylesheet_path else None,
            "width": layout.width,
            "height": layout.height,
            "sprite_bytes": len(run.result.sprite),
            "images": [
                {
                    "identifier": image.identifier,
                    "x": image.x,
                    "y": image.y,
                    "width": image.width,
                    "height": image.height,
                }
                for image in layout.images
            ],
        }

    def list_adapters(self) -> ServiceResult:
        """Names of every registered compositor, layout, and stylesheet."""
        return ServiceResult(ok=True, op="adapters", data=self.registry.names())
