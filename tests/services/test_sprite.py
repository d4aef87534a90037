"""Tests for SpriteService: settings merge and result reporting."""

from __future__ import annotations

from pathlib import Path

import pytest

from spritegen.config.settings import SpriteSettings
from spritegen.registry import AdapterRegistry
from spritegen.services.sprite import SpriteService
from spritegen.services.telemetry import enable_telemetry


def _service(tmp_path: Path, **settings: object) -> SpriteService:
    return SpriteService(
        SpriteSettings(project_root=tmp_path, **settings), registry=AdapterRegistry()
    )


@pytest.mark.usefixtures("_isolated_project")
class TestMakeConfig:
    def test_paths_resolve_against_project_root(self, tmp_path: Path) -> None:
        svc = _service(tmp_path, src=["icons/*.png"], sprite_path=Path("out/sprite.png"))
        config = svc.make_config()
        assert config.src == [str(tmp_path / "icons/*.png")]
        assert config.sprite_path == tmp_path / "out/sprite.png"

    def test_cli_sources_replace_configured_ones(self, tmp_path: Path) -> None:
        svc = _service(tmp_path, src=["icons/*.png"])
        assert svc.make_config(["other/*.png"]).src == [str(tmp_path / "other/*.png")]

    def test_option_groups_merge_per_key(self, tmp_path: Path) -> None:
        svc = _service(tmp_path, layout_options={"scaling": 0.5})
        config = svc.make_config(overrides={"layout_options": {"padding": 2}})
        assert config.layout_options.padding == 2
        assert config.layout_options.scaling == 0.5

    def test_adapter_overrides(self, tmp_path: Path) -> None:
        svc = _service(tmp_path, layout="horizontal")
        config = svc.make_config(overrides={"layout": "packed", "stylesheet": "css"})
        assert (config.layout, config.stylesheet) == ("packed", "css")

    def test_unknown_override(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="bogus"):
            _service(tmp_path).make_config(overrides={"bogus": 1})


@pytest.mark.usefixtures("_isolated_project")
class TestBuild:
    def test_success_describes_layout(self, tmp_path: Path, icons_dir: Path) -> None:
        svc = _service(
            tmp_path,
            src=["icons/*.png"],
            sprite_path=Path("out/sprite.png"),
            stylesheet_path=Path("out/sprite.css"),
            stylesheet="css",
        )
        result = svc.build()
        assert result.ok
        assert result.op == "build"
        assert (result.data["width"], result.data["height"]) == (10, 50)
        assert [i["y"] for i in result.data["images"]] == [0, 20]
        assert result.data["sprite_path"] == str(tmp_path / "out" / "sprite.png")
        assert (tmp_path / "out" / "sprite.css").exists()
        assert result.meta is None

    def test_no_sources(self, tmp_path: Path) -> None:
        result = _service(tmp_path).build()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NO_SOURCES"

    def test_pipeline_errors_become_results(self, tmp_path: Path) -> None:
        result = _service(tmp_path).build(["missing/*.png"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "SOURCE_RESOLUTION"

    def test_invalid_option(self, tmp_path: Path, icons_dir: Path) -> None:
        result = _service(tmp_path).build(
            ["icons/*.png"], {"compositor_options": {"compression_level": 42}}
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_CONFIG"

    def test_telemetry_in_meta(self, tmp_path: Path, icons_dir: Path) -> None:
        enable_telemetry()
        result = _service(tmp_path).build(["icons/*.png"])
        assert result.ok
        assert result.meta is not None
        span = result.meta["telemetry"]
        assert span["name"] == "build"
        assert [c["name"] for c in span["children"]] == [
            "resolve_sources",
            "read_images",
            "layout",
            "render",
            "stylesheet",
            "persist",
        ]


class TestListAdapters:
    def test_lists_builtins(self, tmp_path: Path) -> None:
        result = _service(tmp_path).list_adapters()
        assert result.ok
        assert "packed" in result.data["layouts"]
        assert "pillow" in result.data["compositors"]
