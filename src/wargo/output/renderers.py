"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from wargo.output.console import create_console, get_output, style_for_outcome

if TYPE_CHECKING:
    from rich.console import Console

    from wargo.services.result import ServiceResult


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

    rendered = get_output(console).rstrip("\n")
    output = tool_output(result)
    if output:
        rendered = f"{rendered}\n\n{output}"
    return rendered


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    A failing tool's output still follows the error line.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        line = f"ERROR: {result.op} — {msg}"
        output = tool_output(result)
        return f"{line}\n{output}" if output else line
    return f"OK: {result.op}"


def tool_output(result: ServiceResult) -> str:
    """Captured output of the external tool that failed, or ``""``.

    Returned untouched; it never passes through Rich.
    """
    if result.ok or result.error is None:
        return ""
    return str(result.error.detail.get("output") or "")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="wargo.ok")
    op = Text(f"  {result.op}", style="wargo.op")
    console.print(label, op, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="wargo.key")
    if key in ("root", "output_dir", "index", "entrypoint") or key.endswith("_path"):
        v = Text(str(value), style="wargo.path")
    elif key == "name":
        v = Text(str(value), style="wargo.name")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _step_table(steps: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of build steps."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="wargo.name", no_wrap=True)
    table.add_column("Outcome")
    table.add_column("Time", justify="right", style="dim")
    if verbose:
        table.add_column("Detail", style="dim")

    for index, step in enumerate(steps, start=1):
        outcome = str(step.get("outcome", ""))
        style = style_for_outcome(outcome)
        duration = step.get("duration_ms", 0.0)
        row: list[Any] = [
            str(index),
            str(step.get("label", step.get("name", ""))),
            Text(outcome, style=style) if style else outcome,
            f"{duration:.0f}ms" if outcome in ("ok", "failed") else "",
        ]
        if verbose:
            annotations = step.get("annotations") or {}
            row.append(", ".join(f"{k}={v}" for k, v in annotations.items()))
        table.add_row(*row)
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Status line, failed step table and (verbose) error detail."""
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="wargo.error")
    op = Text(f"  {result.op}", style="wargo.op")
    dash = Text(" — ")
    console.print(label, op, dash, Text(msg), sep="")

    steps = result.data.get("steps")
    if steps and result.data.get("name"):
        console.print()
        console.print(_step_table(steps, verbose=verbose))

    if err is None:
        return

    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k == "output":
                continue
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a successful build: summary fields plus the step table."""
    d = result.data
    _status_line(console, result)
    for key in ("name", "profile", "output_dir", "index", "assets", "asset_release"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "files", len(d.get("files", [])))

    steps = d.get("steps", [])
    if steps:
        console.print()
        console.print(_step_table(steps, verbose=verbose))

    if verbose:
        for name in d.get("files", []):
            console.print(f"  [wargo.path]{name}[/wargo.path]")
        _render_meta(console, result)


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render init/new: project fields and written files."""
    d = result.data
    _status_line(console, result)
    for key in ("name", "root", "entrypoint"):
        if key in d:
            _field(console, key, d[key])

    files = d.get("files_written", [])
    if files:
        console.print(Text(f"  files_written: {len(files)}", style="wargo.key"))
        for name in files:
            console.print(f"    [wargo.path]{name}[/wargo.path]")
    console.print()
    console.print("Run [bold]wargo build[/bold] next to get started!")
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "build": _render_build,
    "init": _render_init,
    "new": _render_init,
}
