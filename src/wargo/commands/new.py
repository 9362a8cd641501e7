"""Command: create a directory and initialize a project inside it."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from wargo.commands._base import WargoCommand

if TYPE_CHECKING:
    from wargo.commands._context import AppContext

_NEW_EXAMPLES = """\
  wargo new pong
  wargo new games/space-race --name space_race"""


@click.command("new", cls=WargoCommand, examples=_NEW_EXAMPLES)
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--name", default=None, help="Crate name (defaults to the directory name).")
@click.pass_obj
def new(app: AppContext, path: Path, name: str | None) -> None:
    """Create PATH and initialize a wasm-rgame project in it."""
    from wargo.services.init import InitService

    target = path if path.is_absolute() else app.settings.project_root / path
    service = InitService(app.settings, app.plugins)
    app.emit(service.new_project(target, name=name))
