"""Source resolution: glob patterns and in-memory images to raw bytes.

Expansion and reading are split so the freshness cache can compute a
signature from the expanded paths without touching file contents.
"""

from __future__ import annotations

import asyncio
import glob
import hashlib
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from spritegen.domain.errors import SourceResolutionError
from spritegen.domain.images import RawImage

logger = logging.getLogger(__name__)

# A glob pattern, a ready RawImage, or a ``{"path": ..., "data": ...}`` mapping.
SourceSpec = str | Path | RawImage | Mapping[str, Any]


@dataclass(frozen=True)
class SourceRef:
    """One expanded source: a file on disk, or in-memory ``data``."""

    path: str
    data: bytes | None = field(default=None, repr=False)

    @property
    def in_memory(self) -> bool:
        return self.data is not None

    def fingerprint(self) -> tuple[str, int | str | None]:
        """``(absolute path, mtime_ns)`` for files, ``(path, sha1)`` for data."""
        if self.data is not None:
            return self.path, hashlib.sha1(self.data).hexdigest()
        resolved = Path(self.path).resolve()
        try:
            return str(resolved), resolved.stat().st_mtime_ns
        except FileNotFoundError:
            return str(resolved), None


def _coerce_in_memory(spec: RawImage | Mapping[str, Any]) -> SourceRef:
    if isinstance(spec, RawImage):
        return SourceRef(path=spec.path, data=spec.data)
    try:
        path, data = spec["path"], spec["data"]
    except KeyError as exc:
        msg = f"In-memory source is missing {exc.args[0]!r}: {dict(spec)!r}"
        raise SourceResolutionError(msg) from exc
    if isinstance(data, str):
        data = data.encode("utf-8")
    return SourceRef(path=str(path), data=bytes(data))


def expand_pattern(pattern: str) -> list[str]:
    """Expand one glob pattern into a sorted list of files."""
    matches = sorted(p for p in glob.glob(pattern, recursive=True) if Path(p).is_file())
    if not matches:
        msg = f"No files match source pattern {pattern!r}"
        raise SourceResolutionError(msg)
    return matches


def expand_sources(src: SourceSpec | Iterable[SourceSpec]) -> list[SourceRef]:
    """Expand every source entry, keeping the given order.

    Raises:
        SourceResolutionError: A pattern matched no files, or *src* was empty.
    """
    if isinstance(src, (str, Path, RawImage, Mapping)):
        src = [src]

    refs: list[SourceRef] = []
    for spec in src:
        if isinstance(spec, (str, Path)):
            refs.extend(SourceRef(path=p) for p in expand_pattern(str(spec)))
        else:
            refs.append(_coerce_in_memory(spec))
    if not refs:
        msg = "No source images given"
        raise SourceResolutionError(msg)
    return refs


def _read(ref: SourceRef) -> RawImage:
    if ref.data is not None:
        return RawImage(path=ref.path, data=ref.data)
    try:
        return RawImage(path=ref.path, data=Path(ref.path).read_bytes())
    except OSError as exc:
        msg = f"Cannot read source {ref.path}: {exc}"
        raise SourceResolutionError(msg) from exc


async def read_sources(refs: Sequence[SourceRef]) -> list[RawImage]:
    """Read every expanded source, preserving order."""
    images = await asyncio.gather(*(asyncio.to_thread(_read, ref) for ref in refs))
    logger.debug("Read %d source images", len(images))
    return list(images)


async def resolve_sources(src: SourceSpec | Iterable[SourceSpec]) -> list[RawImage]:
    """Expand and read *src* in one step."""
    refs = await asyncio.to_thread(expand_sources, src)
    return await read_sources(refs)
