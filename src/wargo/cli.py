"""Root CLI group for wargo with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from wargo import __version__
from wargo.commands import register_commands
from wargo.commands._base import WargoGroup
from wargo.commands._context import AppContext
from wargo.config.settings import WargoSettings


@click.group(cls=WargoGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="wargo")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-C",
    "--project-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Run as if started in this directory.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_dir: Path | None,
) -> None:
    """wargo — build and bundle wasm-rgame projects."""
    ctx.ensure_object(dict)
    settings = WargoSettings.from_cli(
        config_path=config_path,
        project_root=project_dir,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
