"""Shared Jinja2 template loading with user override directories."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from spritegen.domain.naming import format_px

TEMPLATE_SUFFIX = ".j2"


def build_template_environment(
    group: str, *, override_dirs: Sequence[Path] = ()
) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    Each directory in *override_dirs* is searched both as a namespaced
    directory (``<dir>/<group>/``) and flat, so a project can override a
    single built-in template without copying the rest.
    """

    loaders: list[BaseLoader] = []
    for root in override_dirs:
        loaders.append(FileSystemLoader([str(root / group), str(root)]))

    loaders.append(PackageLoader("spritegen", f"templates/{group}"))
    env = Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)
    env.filters["px"] = format_px
    return env
