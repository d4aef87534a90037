"""Compositor that shells out to the GraphicsMagick ``gm`` binary.

The PNG filter and zlib level travel in a single ``-quality`` value:
``compression_level * 10 + filter code``.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from pathlib import Path

from spritegen.domain.errors import RenderError
from spritegen.domain.images import ImageDescriptor, Layout, RawImage
from spritegen.domain.options import CompositorOptions
from spritegen.domain.types import PNG_FILTER_CODES, PngFilter


def filter_to_quality(png_filter: PngFilter | str) -> int:
    """Map a PNG filter name to its GraphicsMagick quality digit."""
    return PNG_FILTER_CODES[PngFilter(png_filter)]


def quality_for(options: CompositorOptions) -> int:
    return options.compression_level * 10 + filter_to_quality(options.filter)


class GraphicsMagickCompositor:
    """Run ``gm identify`` / ``gm convert`` as subprocesses."""

    name = "gm"

    def __init__(self, binary: str = "gm") -> None:
        self.binary = binary

    async def _run(self, *args: str, stdin: bytes | None = None) -> bytes:
        executable = shutil.which(self.binary)
        if executable is None:
            msg = f"GraphicsMagick binary {self.binary!r} not found on PATH"
            raise RenderError(msg)
        proc = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdin=asyncio.subprocess.PIPE if stdin is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate(stdin)
        if proc.returncode != 0:
            msg = f"gm {args[0]} exited {proc.returncode}: {stderr.decode(errors='replace').strip()}"
            raise RenderError(msg)
        return stdout

    async def read_image(self, raw: RawImage) -> ImageDescriptor:
        out = await self._run("identify", "-format", "%w %h\n", "-", stdin=raw.data)
        try:
            width, height = (int(v) for v in out.decode().split()[:2])
        except ValueError as exc:
            msg = f"Unexpected gm identify output for {raw.path}: {out!r}"
            raise RenderError(msg) from exc
        return ImageDescriptor(identifier=raw.path, data=raw.data, width=width, height=height)

    def convert_args(self, layout: Layout, tiles: list[Path], options: CompositorOptions) -> list[str]:
        """Build the ``gm convert`` argument list for *layout*."""
        args = [
            "convert",
            "-size",
            f"{layout.width}x{layout.height}",
            "xc:transparent",
        ]
        for placed, tile in zip(layout.images, tiles, strict=True):
            args += [
                "-geometry",
                f"{placed.width}x{placed.height}!",
                "-page",
                f"+{placed.x}+{placed.y}",
                str(tile),
            ]
        args += ["-mosaic", "-quality", str(quality_for(options)), "png:-"]
        return args

    async def render(self, layout: Layout, options: CompositorOptions) -> bytes:
        if layout.width <= 0 or layout.height <= 0:
            msg = f"Cannot render an empty {layout.width}x{layout.height} sprite"
            raise RenderError(msg)
        with tempfile.TemporaryDirectory(prefix="spritegen-gm-") as tmp:
            tiles: list[Path] = []
            for placed in layout.images:
                tile = Path(tmp) / f"{placed.index}{Path(placed.identifier).suffix}"
                await asyncio.to_thread(tile.write_bytes, placed.data)
                tiles.append(tile)
            return await self._run(*self.convert_args(layout, tiles, options))
