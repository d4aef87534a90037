"""Adapter registry: resolves compositor, layout, and stylesheet selections.

Selections are resolved once, when a build configuration is turned into a
:class:`~spritegen.services.pipeline.BuildPlan`; the pipeline itself only
ever sees the three capability interfaces.

Lookup order for a name: plugins (most recent first), then built-ins.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from spritegen.compositors import BUILTIN_COMPOSITORS, Compositor
from spritegen.domain.errors import UnknownAdapterError
from spritegen.domain.layout import BUILTIN_LAYOUTS, LayoutFunction
from spritegen.domain.types import StylesheetFormat
from spritegen.plugins.manager import PluginManager
from spritegen.stylesheets import BUILTIN_STYLESHEETS, CallableStylesheet, Stylesheet
from spritegen.stylesheets.base import TemplateStylesheet

logger = logging.getLogger(__name__)

CompositorSelection = str | Compositor
LayoutSelection = str | LayoutFunction
StylesheetSelection = str | Stylesheet | Callable[..., Any]


class AdapterRegistry:
    """Named adapters from built-ins plus any registered plugins."""

    def __init__(
        self,
        plugin_manager: PluginManager | None = None,
        *,
        template_dirs: Sequence[Path] = (),
    ) -> None:
        self.plugin_manager = plugin_manager
        self.template_dirs = tuple(template_dirs)

    def _merged(self, builtins: dict[str, Any], hook_name: str) -> dict[str, Any]:
        merged = dict(builtins)
        if self.plugin_manager is not None:
            merged.update(self.plugin_manager.collect(hook_name))
        return merged

    @property
    def compositors(self) -> dict[str, Compositor]:
        return self._merged(BUILTIN_COMPOSITORS, "register_compositors")

    @property
    def layouts(self) -> dict[str, LayoutFunction]:
        return self._merged(BUILTIN_LAYOUTS, "register_layouts")

    @property
    def stylesheets(self) -> dict[str, Stylesheet]:
        builtins: dict[str, Stylesheet] = dict(BUILTIN_STYLESHEETS)
        if self.template_dirs:
            builtins = {
                fmt.value: TemplateStylesheet(fmt.value, override_dirs=self.template_dirs)
                for fmt in StylesheetFormat
            }
        return self._merged(builtins, "register_stylesheets")

    def names(self) -> dict[str, list[str]]:
        """Sorted adapter names per kind (for ``spritegen layouts``)."""
        return {
            "compositors": sorted(self.compositors),
            "layouts": sorted(self.layouts),
            "stylesheets": sorted(self.stylesheets),
        }

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def compositor(self, selection: CompositorSelection) -> Compositor:
        if not isinstance(selection, str):
            return selection
        try:
            return self.compositors[selection]
        except KeyError:
            msg = f"Unknown compositor {selection!r}; available: {sorted(self.compositors)}"
            raise UnknownAdapterError(msg) from None

    def layout(self, selection: LayoutSelection) -> LayoutFunction:
        if not isinstance(selection, str):
            return selection
        try:
            return self.layouts[selection]
        except KeyError:
            msg = f"Unknown layout {selection!r}; available: {sorted(self.layouts)}"
            raise UnknownAdapterError(msg) from None

    def stylesheet(self, selection: StylesheetSelection) -> Stylesheet:
        """Resolve a stylesheet selection.

        A registered name selects that adapter; any other string is used as
        an inline Jinja2 template; a callable is wrapped as-is.
        """
        if isinstance(selection, str):
            known = self.stylesheets
            if selection in known:
                return known[selection]
            logger.debug("Treating stylesheet selection as an inline template")
            return TemplateStylesheet(source=selection)
        if isinstance(selection, Stylesheet):
            return selection
        return CallableStylesheet(selection)


@functools.cache
def default_registry() -> AdapterRegistry:
    """Process-wide registry with entry-point plugins loaded."""
    manager = PluginManager()
    loaded = manager.discover_and_load()
    if loaded:
        logger.debug("Loaded spritegen plugins: %s", loaded)
    return AdapterRegistry(manager)
