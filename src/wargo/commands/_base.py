"""Custom Click base classes with --examples support.

Provides WargoCommand and WargoGroup that accept an ``examples`` parameter.
When ``--examples`` is passed, the command prints usage examples and exits.
WargoGroup also replaces Click's terse "No such command" error with one
that lists the available subcommands.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class UnknownCommand(click.UsageError):
    """Raised for a subcommand name the group does not know (exit code 2)."""

    def __init__(self, name: str, available: list[str], ctx: click.Context | None = None) -> None:
        lines = [f"Unknown command '{name}'."]
        if available:
            lines.append("Available subcommands:")
            lines.extend(f"  {cmd}" for cmd in available)
        super().__init__("\n".join(lines), ctx=ctx)
        self.name = name
        self.available = available


class WargoCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class WargoGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = WargoCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = WargoCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = click.utils.make_str(args[0])
        if self.get_command(ctx, cmd_name) is None and not ctx.resilient_parsing:
            raise UnknownCommand(cmd_name, self.list_commands(ctx), ctx=ctx)
        return super().resolve_command(ctx, args)
