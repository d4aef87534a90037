"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from spritegen.plugins.hookspecs import hookimpl
from spritegen.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
