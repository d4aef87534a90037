"""Shared pytest fixtures and test helpers for spritegen tests."""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from PIL import Image

from spritegen.domain.images import ImageDescriptor
from spritegen.services.telemetry import disable_telemetry

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def png_bytes(size: tuple[int, int], color: tuple[int, int, int, int] = RED) -> bytes:
    """Encode a solid-color RGBA PNG."""
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, "PNG")
    return buffer.getvalue()


def write_png(
    path: Path, size: tuple[int, int], color: tuple[int, int, int, int] = RED
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(png_bytes(size, color))
    return path


def descriptor(identifier: str, width: int, height: int) -> ImageDescriptor:
    """An ImageDescriptor without real pixel data (layout tests only)."""
    return ImageDescriptor(identifier=identifier, data=b"", width=width, height=height)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def icons_dir(tmp_path: Path) -> Path:
    """``icons/a.png`` (10x20, red) and ``icons/b.png`` (10x30, blue)."""
    icons = tmp_path / "icons"
    write_png(icons / "a.png", (10, 20), RED)
    write_png(icons / "b.png", (10, 30), BLUE)
    return icons


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from a temp directory with no spritegen config in the environment.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("SPRITEGEN_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    sprite_level = logging.getLogger("spritegen").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("spritegen").setLevel(sprite_level)
    disable_telemetry()
