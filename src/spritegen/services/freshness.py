"""Freshness cache and request coalescer around :func:`build`.

For hosts that check for a rebuild on every request: a build is skipped when
no source or output file changed since the last successful build for the
same configuration, and concurrent callers for one configuration share a
single in-flight build.

State is process-wide when the module-level :data:`default_cache` is used:
it starts empty, is only mutated here, and is never persisted. All callers
of one cache instance must share an event loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable, Mapping
from pathlib import Path
from typing import Any

from spritegen.infrastructure.filesystem import modified_ns
from spritegen.infrastructure.sources import SourceRef, expand_sources
from spritegen.services.pipeline import BuildConfig, BuildResult, build

logger = logging.getLogger(__name__)

Signature = frozenset[tuple[str, Any]]
ConfigKey = tuple[Hashable, ...]
Builder = Callable[[BuildConfig], Awaitable[BuildResult]]


def _selection_key(selection: Any) -> Hashable:
    return selection if isinstance(selection, str) else ("object", id(selection))


def config_identity(config: BuildConfig, refs: list[SourceRef]) -> ConfigKey:
    """Identity of a configuration: sources, outputs, adapters, and options."""
    return (
        tuple(ref.path for ref in refs),
        str(config.sprite_path) if config.sprite_path else None,
        str(config.stylesheet_path) if config.stylesheet_path else None,
        _selection_key(config.compositor),
        _selection_key(config.layout),
        _selection_key(config.stylesheet),
        config.layout_options,
        config.compositor_options,
        config.stylesheet_options,
    )


def _output_entry(label: str, path: Path | None) -> tuple[str, Any] | None:
    if path is None:
        return None
    return f"{label}:{path.resolve()}", modified_ns(path)


def source_entries(refs: list[SourceRef]) -> Signature:
    """Fingerprints of every expanded source."""
    return frozenset(ref.fingerprint() for ref in refs)


def output_entries(config: BuildConfig) -> set[tuple[str, Any]]:
    """Modification times of the sprite and stylesheet outputs."""
    entries: set[tuple[str, Any]] = set()
    for label, path in (("sprite", config.sprite_path), ("stylesheet", config.stylesheet_path)):
        entry = _output_entry(label, path)
        if entry is not None:
            entries.add(entry)
    return entries


def build_signature(config: BuildConfig, refs: list[SourceRef]) -> Signature:
    """Source fingerprints plus the modification times of both outputs."""
    return source_entries(refs) | output_entries(config)


class FreshnessCache:
    """Skip unchanged rebuilds and coalesce concurrent ones."""

    def __init__(self, builder: Builder = build) -> None:
        self._builder = builder
        self._signatures: dict[ConfigKey, Signature] = {}
        self._inflight: dict[ConfigKey, asyncio.Task[None]] = {}
        self._locks: dict[ConfigKey, asyncio.Lock] = {}
        self._callers: dict[ConfigKey, int] = {}

    def _snapshot(self, config: BuildConfig) -> tuple[ConfigKey, list[SourceRef]]:
        refs = expand_sources(config.src)
        return config_identity(config, refs), refs

    async def ensure_fresh(self, config: BuildConfig | Mapping[str, Any]) -> bool:
        """Rebuild *config* if anything changed; return True when a build ran.

        Raises whatever the underlying build raises. Waiters that are
        cancelled never cancel the shared build.
        """
        config = BuildConfig.coerce(config)
        key, refs = await asyncio.to_thread(self._snapshot, config)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._callers[key] = self._callers.get(key, 0) + 1
        try:
            async with lock:
                task = self._inflight.get(key)
                if task is None:
                    sources = await asyncio.to_thread(source_entries, refs)
                    signature = sources | await asyncio.to_thread(output_entries, config)
                    if self._signatures.get(key) == signature:
                        logger.debug("Sprite is fresh, skipping build")
                        return False
                    task = asyncio.create_task(self._run(key, config, sources))
                    self._inflight[key] = task
                else:
                    logger.debug("Joining in-flight build")

            await asyncio.shield(task)
            return True
        finally:
            self._release(key)

    def _release(self, key: ConfigKey) -> None:
        remaining = self._callers[key] - 1
        if remaining:
            self._callers[key] = remaining
        else:
            del self._callers[key]
            del self._locks[key]

    async def _run(self, key: ConfigKey, config: BuildConfig, sources: Signature) -> None:
        # Sources keep their pre-build stats; only the outputs are re-read.
        try:
            await self._builder(config)
            outputs = await asyncio.to_thread(output_entries, config)
            self._signatures[key] = sources | outputs
            logger.debug("Recorded build signature")
        finally:
            self._inflight.pop(key, None)

    def is_recorded(self, config: BuildConfig | Mapping[str, Any]) -> bool:
        """Whether a successful build has been recorded for *config*."""
        key, _refs = self._snapshot(BuildConfig.coerce(config))
        return key in self._signatures

    def clear(self) -> None:
        """Forget every recorded signature (in-flight builds are untouched)."""
        self._signatures.clear()


default_cache = FreshnessCache()


async def ensure_fresh(config: BuildConfig | Mapping[str, Any]) -> bool:
    """:meth:`FreshnessCache.ensure_fresh` on the process-wide cache."""
    return await default_cache.ensure_fresh(config)
