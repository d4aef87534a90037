"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus direct registration for in-process plugins.
Capabilities: named adapters and the ``post_build`` lifecycle hook.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from spritegen.plugins.hookspecs import SpritegenHookSpec

PROJECT_NAME = "spritegen"
ENTRY_POINT_GROUP = "spritegen.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, adapter collection, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SpritegenHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``spritegen.plugins`` entry-point group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Adapter collection
    # ------------------------------------------------------------------

    def collect(self, hook_name: str) -> dict[str, Any]:
        """Merge the name -> adapter dicts every plugin returns for *hook_name*.

        On a name clash the most recently registered plugin wins.
        A plugin that raises or returns a non-dict is skipped with a warning.
        """
        merged: dict[str, Any] = {}
        for impl in getattr(self._pm.hook, hook_name).get_hookimpls():
            try:
                result = impl.function()
            except Exception:
                logger.warning(
                    "Plugin %s failed in %s", impl.plugin_name, hook_name, exc_info=True
                )
                continue
            if result is None:
                continue
            if not isinstance(result, dict):
                logger.warning(
                    "Plugin %s returned non-dict from %s", impl.plugin_name, hook_name
                )
                continue
            merged.update(result)
        return merged

    def notify_build(
        self, *, sprite_path: str | None, stylesheet_path: str | None, image_count: int
    ) -> None:
        """Dispatch ``post_build``.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            self._pm.hook.post_build(
                sprite_path=sprite_path,
                stylesheet_path=stylesheet_path,
                image_count=image_count,
            )
        except Exception:
            logger.warning("post_build hook failed", exc_info=True)

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
