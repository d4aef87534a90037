"""ASGI middleware that keeps a sprite fresh while an app serves requests.

Usage::

    app = SpriteMiddleware(
        app,
        {"src": ["assets/icons/*.png"],
         "sprite_path": "static/sprite.png",
         "stylesheet_path": "static/sprite.css",
         "stylesheet": "css"},
    )

Every HTTP request first awaits :meth:`FreshnessCache.ensure_fresh`; the
build only runs when a source or output changed. A failed build propagates
to the server like any other application error.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, MutableMapping
from typing import Any

from spritegen.services.freshness import FreshnessCache, default_cache
from spritegen.services.pipeline import BuildConfig

Scope = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send = Callable[[MutableMapping[str, Any]], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]


class SpriteMiddleware:
    """Ensure the sprite is fresh before delegating to the wrapped app."""

    def __init__(
        self,
        app: ASGIApp,
        config: BuildConfig | Mapping[str, Any],
        *,
        cache: FreshnessCache | None = None,
        scope_types: tuple[str, ...] = ("http",),
    ) -> None:
        self.app = app
        self.config = BuildConfig.coerce(config)
        self.cache = cache or default_cache
        self.scope_types = scope_types

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in self.scope_types:
            await self.cache.ensure_fresh(self.config)
        await self.app(scope, receive, send)
