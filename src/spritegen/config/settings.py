"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``SPRITEGEN_*`` prefix, ``__`` for nested options
  3. TOML file: ``spritegen.toml`` discovered via walk-up
  4. Code defaults: baked into the option models

A ``spritegen.toml`` uses the same keys as :class:`BuildConfig`::

    src = ["icons/*.png"]
    sprite_path = "public/img/sprite.png"
    stylesheet_path = "styles/sprite.styl"
    layout = "packed"

    [layout_options]
    padding = 2

Relative paths and patterns are resolved against the directory holding the
TOML file (or the cwd when there is none).
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from spritegen.domain.options import CompositorOptions, LayoutOptions, StylesheetOptions
from spritegen.domain.types import CompositorName, LayoutStrategy, StylesheetFormat

CONFIG_FILENAME = "spritegen.toml"
CONFIG_ENV_VAR = "SPRITEGEN_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Locate ``spritegen.toml`` in *start* (default: cwd) or any parent.

    ``SPRITEGEN_CONFIG`` short-circuits the search; if it names a missing
    file, no config is used.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override)
        return candidate if candidate.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``spritegen.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class SpriteSettings(BaseSettings):
    """Settings for the spritegen CLI.

    Attributes:
        project_root: Directory relative paths are resolved against.
        config_path: The TOML file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SPRITEGEN_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Build defaults ---
    src: list[str] = Field(default_factory=list)
    compositor: str = CompositorName.PILLOW.value
    layout: str = LayoutStrategy.VERTICAL.value
    stylesheet: str = StylesheetFormat.STYLUS.value
    sprite_path: Path | None = None
    stylesheet_path: Path | None = None
    template_dirs: list[Path] = Field(default_factory=list)

    compositor_options: CompositorOptions = Field(default_factory=CompositorOptions)
    layout_options: LayoutOptions = Field(default_factory=LayoutOptions)
    stylesheet_options: StylesheetOptions = Field(default_factory=StylesheetOptions)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> SpriteSettings:
        """Construct settings from a CLI invocation.

        Discovers ``spritegen.toml`` via walk-up (or explicit *config_path*),
        takes *project_root* from the config file's directory, and merges
        CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def resolve_path(self, value: Path | str) -> Path:
        """Anchor a relative path at :attr:`project_root`."""
        path = Path(value)
        return path if path.is_absolute() else self.project_root / path
