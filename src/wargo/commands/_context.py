"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from wargo.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from wargo.config.settings import WargoSettings
    from wargo.plugins.manager import PluginManager
    from wargo.services.result import ServiceResult

logger = logging.getLogger(__name__)

LOCAL_PLUGIN_DIR = ".wargo/plugins"


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  Plugins are loaded
    on first use so ``--help`` and ``--version`` never import them.
    """

    def __init__(self, settings: WargoSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from wargo.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (discovered lazily on first access)."""
        if self._plugins is None:
            from wargo.plugins.manager import PluginManager

            self._plugins = PluginManager()
            if self.settings.plugins.enabled:
                local_dir = self.settings.project_root / LOCAL_PLUGIN_DIR
                names = self._plugins.load(local_dir=local_dir)
                logger.debug("Loaded plugins: %s", ", ".join(names) or "none")
        return self._plugins

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        if self._plugins is not None and self._plugins.warnings:
            result = result.model_copy(
                update={"warnings": [*self._plugins.warnings, *result.warnings]}
            )
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
