"""Command: compile, generate bindings and bundle the project."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from wargo.commands._base import WargoCommand

if TYPE_CHECKING:
    from wargo.commands._context import AppContext

_BUILD_EXAMPLES = """\
  wargo build
  wargo build --release
  wargo build --js-path ../wasm-rgame-js/dist
  wargo --json build | jq .data.index"""


@click.command("build", cls=WargoCommand, examples=_BUILD_EXAMPLES)
@click.option(
    "--js-path",
    type=click.Path(path_type=Path, file_okay=False, resolve_path=True),
    default=None,
    help="Use a local web asset directory instead of downloading a release.",
)
@click.option(
    "--release/--debug",
    "release",
    default=None,
    help="Build the release profile (default from [build] release).",
)
@click.pass_obj
def build(app: AppContext, js_path: Path | None, release: bool | None) -> None:
    """Build the project and bundle it for the browser."""
    from wargo.services.build import BuildService

    service = BuildService(app.settings, app.plugins)
    app.emit(service.build(js_path=js_path, release=release))
