"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from spritegen.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from spritegen.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    path = result.data.get("sprite_path")
    return str(path) if path else f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="sprite.ok")
    op = Text(f"  {result.op}", style="sprite.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="sprite.key")
    style = "sprite.path" if key.endswith("_path") else ""
    console.print(k, Text(str(value), style=style), end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _image_table(images: list[dict[str, Any]]) -> Table:
    """One row per placed image, in input order."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Image", style="sprite.class", no_wrap=True)
    for col in ("X", "Y", "Width", "Height"):
        table.add_column(col, style="sprite.coord", justify="right")
    for image in images:
        table.add_row(
            str(image["identifier"]),
            str(image["x"]),
            str(image["y"]),
            str(image["width"]),
            str(image["height"]),
        )
    return table


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="sprite.error")
    op = Text(f"  {result.op}", style="sprite.op")
    console.print(label, op, Text(": "), Text(msg), end="")
    console.print()
    if verbose and err:
        _field(console, "code", err.code)
        for key, value in err.detail.items():
            _field(console, key, value)


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "size", f"{d['width']}x{d['height']}")
    _field(console, "images", len(d["images"]))
    for key in ("sprite_path", "stylesheet_path"):
        if d.get(key):
            _field(console, key, d[key])
    _field(console, "sprite_bytes", d["sprite_bytes"])
    if verbose:
        if d["images"]:
            console.print()
            console.print(_image_table(d["images"]))
        _render_meta(console, result)


def _render_adapters(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for kind, names in result.data.items():
        _field(console, kind, ", ".join(names))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "build": _render_build,
    "adapters": _render_adapters,
}
