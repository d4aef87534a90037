"""Output persistence and path helpers.

Writes are not atomic: a caller that needs atomic outputs should write to a
temporary path and rename.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from spritegen.domain.errors import PersistenceError


def write_output(path: Path, content: bytes | str) -> None:
    """Write *content* to *path*, creating parent directories first."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        path.write_text(content, encoding="utf-8")
    else:
        path.write_bytes(content)


async def persist(path: Path, content: bytes | str) -> None:
    """Async :func:`write_output` that raises :class:`PersistenceError`."""
    try:
        await asyncio.to_thread(write_output, path, content)
    except OSError as exc:
        msg = f"Cannot write {path}: {exc}"
        raise PersistenceError(msg) from exc


def modified_ns(path: Path) -> int | None:
    """Modification time in nanoseconds, or None if *path* does not exist."""
    try:
        return path.stat().st_mtime_ns
    except FileNotFoundError:
        return None


def relative_sprite_path(sprite_path: Path, stylesheet_path: Path) -> str:
    """Path to the sprite as seen from the stylesheet's directory.

    Always uses forward slashes so the result is a valid URL path.

    Examples:
        >>> relative_sprite_path(Path("out/img/sprite.png"), Path("out/css/sprite.css"))
        '../img/sprite.png'
    """
    start = Path(stylesheet_path).absolute().parent
    relative = os.path.relpath(Path(sprite_path).absolute(), start)
    return Path(relative).as_posix()
