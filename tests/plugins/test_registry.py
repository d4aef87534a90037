"""Tests for AdapterRegistry name resolution."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from spritegen.compositors import BUILTIN_COMPOSITORS
from spritegen.domain.errors import UnknownAdapterError
from spritegen.domain.images import Layout
from spritegen.domain.layout import packed, vertical
from spritegen.domain.options import StylesheetOptions
from spritegen.plugins import PluginManager, hookimpl
from spritegen.registry import AdapterRegistry
from spritegen.stylesheets import CallableStylesheet
from spritegen.stylesheets.base import TemplateStylesheet


class _Plugin:
    @hookimpl
    def register_layouts(self):
        return {"diagonal": vertical}

    @hookimpl
    def register_stylesheets(self):
        return {"json": CallableStylesheet(lambda layout, options: "{}")}


@pytest.fixture
def registry() -> AdapterRegistry:
    pm = PluginManager()
    pm.register_plugin(_Plugin())
    return AdapterRegistry(pm)


class TestNames:
    def test_builtins_without_plugins(self) -> None:
        names = AdapterRegistry().names()
        assert names["compositors"] == ["gm", "pillow"]
        assert names["layouts"] == ["horizontal", "packed", "vertical"]
        assert names["stylesheets"] == ["css", "less", "sass", "scss", "stylus"]

    def test_plugin_names_are_merged(self, registry: AdapterRegistry) -> None:
        names = registry.names()
        assert "diagonal" in names["layouts"]
        assert "json" in names["stylesheets"]


class TestResolution:
    def test_builtin_names(self) -> None:
        reg = AdapterRegistry()
        assert reg.compositor("pillow") is BUILTIN_COMPOSITORS["pillow"]
        assert reg.layout("packed") is packed

    def test_plugin_layout(self, registry: AdapterRegistry) -> None:
        assert registry.layout("diagonal") is vertical

    def test_objects_pass_through(self) -> None:
        reg = AdapterRegistry()
        compositor = BUILTIN_COMPOSITORS["gm"]
        assert reg.compositor(compositor) is compositor
        assert reg.layout(packed) is packed

    @pytest.mark.parametrize("kind", ["compositor", "layout"])
    def test_unknown_name(self, kind: str) -> None:
        with pytest.raises(UnknownAdapterError, match="nope"):
            getattr(AdapterRegistry(), kind)("nope")

    def test_unknown_stylesheet_name_is_inline_template(self) -> None:
        sheet = AdapterRegistry().stylesheet("test template")
        assert isinstance(sheet, TemplateStylesheet)
        assert asyncio.run(sheet.render(Layout(0, 0), StylesheetOptions())) == "test template"

    def test_callable_stylesheet(self) -> None:
        sheet = AdapterRegistry().stylesheet(lambda layout, options: "fn")
        assert asyncio.run(sheet.render(Layout(0, 0), StylesheetOptions())) == "fn"

    def test_template_dirs_override_builtins(self, tmp_path: Path) -> None:
        (tmp_path / "css.j2").write_text("overridden")
        sheet = AdapterRegistry(template_dirs=[tmp_path]).stylesheet("css")
        assert asyncio.run(sheet.render(Layout(0, 0), StylesheetOptions())) == "overridden"
