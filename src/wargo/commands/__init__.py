"""Subcommand modules for wargo.

Provides register_commands() which uses deferred imports to keep
``wargo --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from wargo.commands.build import build
    from wargo.commands.init_cmd import init_cmd
    from wargo.commands.new import new

    cli.add_command(build)
    cli.add_command(init_cmd)
    cli.add_command(new)
