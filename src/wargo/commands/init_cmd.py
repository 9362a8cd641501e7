"""Command: project initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wargo.commands._base import WargoCommand

if TYPE_CHECKING:
    from wargo.commands._context import AppContext

_INIT_EXAMPLES = """\
  wargo init
  wargo init --name my-game
  wargo -C games/pong init"""


@click.command("init", cls=WargoCommand, examples=_INIT_EXAMPLES)
@click.option("--name", default=None, help="Crate name (defaults to the directory name).")
@click.pass_obj
def init_cmd(app: AppContext, name: str | None) -> None:
    """Initialize a wasm-rgame project in the current directory."""
    from wargo.services.init import InitService

    service = InitService(app.settings, app.plugins)
    app.emit(service.init_project(app.settings.project_root, name=name))
