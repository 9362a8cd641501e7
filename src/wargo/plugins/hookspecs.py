"""Pluggy hook specifications for wargo lifecycle events.

Hooks are called synchronously in the invoking process, around each
build step and after init/build complete.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("wargo")


class WargoHookSpec:
    """Hook specifications for the wargo plugin system."""

    @hookspec
    def pre_step(self, step: str, project_name: str) -> None:
        """Called before a build step starts."""

    @hookspec
    def post_step(self, step: str, ok: bool, duration_ms: float) -> None:
        """Called after a build step finishes (successfully or not)."""

    @hookspec
    def post_build(self, project_name: str, output_dir: str, ok: bool) -> None:
        """Called once a build reaches ``done`` or ``failed``."""

    @hookspec
    def post_init(self, project_name: str, root: str) -> None:
        """Called after a project is initialized."""
