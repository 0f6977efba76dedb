"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.text import Text

from propbind.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from propbind.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="pb.ok")
    op = Text(f"  {result.op}", style="pb.op")
    console.print(label, op, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pb.key")
    v = Text(str(value), style="pb.path" if key in ("path", "source") else "")
    console.print(k, v, sep="", end="")
    console.print()


def _failures(console: Console, missing: list[str], errored: dict[str, str]) -> None:
    """Print missing fields and errored fields with their messages."""
    for name in missing:
        console.print(Text("  missing ", style="pb.warning"), Text(name), sep="")
    for name, message in errored.items():
        console.print(Text("  errored ", style="pb.error"), Text(f"{name}: {message}"), sep="")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pb.error")
    op = Text(f"  {result.op}", style="pb.op")
    console.print(label, op, Text(": "), Text(msg), sep="")

    if err is None or not err.detail:
        return
    if result.error_code == "BINDING_FAILED":
        _failures(console, list(err.detail.get("missing", [])), dict(err.detail.get("errored", {})))
    elif verbose:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the bound settings as ``key=value`` lines."""
    if verbose:
        _status_line(console, result)
        for key in ("source", "model", "encoding", "complete"):
            if key in result.data:
                _field(console, key, result.data[key])
        console.print()
    for key, value in result.data.get("settings", {}).items():
        line = Text(key, style="pb.setting")
        line.append("=")
        line.append(str(value))
        console.print(line)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "source", result.data.get("source", ""))
    _field(console, "model", result.data.get("model", ""))


def _render_template(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the written template path and the fields left for a human."""
    _status_line(console, result)
    _field(console, "path", result.data.get("path", ""))
    if verbose:
        _field(console, "encoding", result.data.get("encoding", ""))
    _failures(console, list(result.data.get("missing", [])), dict(result.data.get("errored", {})))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "show": _render_show,
    "check": _render_check,
    "template": _render_template,
}
