"""spritegen: sprite sheet and stylesheet generator."""

from __future__ import annotations

__version__ = "0.4.0"

from spritegen.services.freshness import FreshnessCache, default_cache
from spritegen.services.middleware import SpriteMiddleware
from spritegen.services.pipeline import BuildConfig, BuildResult, build, generate

__all__ = [
    "BuildConfig",
    "BuildResult",
    "FreshnessCache",
    "SpriteMiddleware",
    "__version__",
    "build",
    "default_cache",
    "generate",
]
