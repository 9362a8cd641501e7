"""BuildService — compile, generate bindings, bundle.

Pipeline: COMPILE -> BIND -> BUNDLE (fail-fast, no retries)

State: ``idle -> compiling -> generating_bindings -> bundling -> done``,
``failed`` from any non-terminal state. The bundled output directory is
only reset inside the bundle step, after the web assets have been
resolved, so a failed compile or bindgen run leaves the previous bundle
in place.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from wargo.domain.errors import FilesystemError, WargoError
from wargo.domain.states import BuildState, BuildStateMachine
from wargo.domain.steps import BuildStep, plan_steps
from wargo.infrastructure.filesystem import copy_assets, load_project, reset_dir
from wargo.infrastructure.process import run_tool
from wargo.services.assets import resolve_assets
from wargo.services.base import BaseService
from wargo.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from wargo.config.settings import WargoSettings
    from wargo.domain.project import ProjectDescriptor
    from wargo.infrastructure.releases import ReleaseClient
    from wargo.plugins.manager import PluginManager

log = structlog.get_logger(__name__)


@dataclass
class BuildContext:
    """Mutable state shared by the steps of one build."""

    project: ProjectDescriptor
    release: bool
    js_path: Path | None
    output_dir: Path
    staging_dir: Path
    artifact: Path | None = None
    bindings: list[str] = field(default_factory=list)
    bundled: list[str] = field(default_factory=list)
    asset_origin: str | None = None
    asset_release: str | None = None


def _rel(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


class BuildService(BaseService):
    """Runs the build pipeline for the project at ``settings.project_root``."""

    def __init__(
        self,
        settings: WargoSettings,
        plugins: PluginManager | None = None,
        *,
        release_client: ReleaseClient | None = None,
    ) -> None:
        super().__init__(settings, plugins)
        self._release_client = release_client

    def build(
        self,
        *,
        js_path: Path | None = None,
        release: bool | None = None,
    ) -> ServiceResult:
        """Build and bundle the project.

        Args:
            js_path: Local web asset directory; overrides release download.
            release: Build the release profile. Defaults to ``[build] release``.
        """
        op = "build"
        warnings: list[str] = []
        machine = BuildStateMachine()
        steps = plan_steps()
        root = self._settings.project_root

        try:
            project = load_project(root)
        except WargoError as exc:
            machine.fail()
            for step in steps:
                step.skip()
            return ServiceResult(
                ok=False,
                op=op,
                data=self._report(machine, steps, None),
                warnings=warnings,
                error=ServiceError.from_exception(exc),
            )

        cfg = self._settings.build
        ctx = BuildContext(
            project=project,
            release=cfg.release if release is None else release,
            js_path=js_path,
            output_dir=root / cfg.output_dir / project.name,
            staging_dir=root / cfg.staging_dir / project.name,
        )

        handlers: dict[str, Callable[[BuildContext, BuildStep], None]] = {
            "compile": self._compile,
            "bindgen": self._generate_bindings,
            "bundle": self._bundle,
        }

        failure: WargoError | None = None
        for step in steps:
            if failure is not None:
                step.skip()
                continue

            machine.advance(step.state)
            self._dispatch_event(
                "pre_step", {"step": step.name, "project_name": project.name}, warnings
            )
            log.info("step.start", step=step.name, label=step.label)
            step.start()
            try:
                handlers[step.name](ctx, step)
            except WargoError as exc:
                if exc.step is None:
                    exc.step = step.name
                step.fail(exc.message)
                machine.fail()
                failure = exc
                log.debug("step.failed", step=step.name, error=exc.message)
            else:
                step.succeed()
                log.debug("step.complete", step=step.name, duration_ms=round(step.duration_ms, 2))
            self._dispatch_event(
                "post_step",
                {"step": step.name, "ok": failure is None, "duration_ms": step.duration_ms},
                warnings,
            )

        if failure is None:
            machine.advance(BuildState.DONE)

        self._dispatch_event(
            "post_build",
            {
                "project_name": project.name,
                "output_dir": str(ctx.output_dir),
                "ok": failure is None,
            },
            warnings,
        )

        data = self._report(machine, steps, ctx)
        if failure is not None:
            return ServiceResult(
                ok=False,
                op=op,
                data=data,
                warnings=warnings,
                error=ServiceError.from_exception(failure),
            )

        log.info("build.done", project=project.name, index=data["index"])
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _compile(self, ctx: BuildContext, step: BuildStep) -> None:
        target = self._settings.cargo.target
        args = ["build", "--target", target]
        if ctx.release:
            args.append("--release")
        run_tool(self._settings.cargo.program, args, step=step.name, cwd=ctx.project.root)

        artifact = ctx.project.wasm_artifact(target, release=ctx.release)
        if not artifact.is_file():
            raise FilesystemError(artifact, "compiled artifact not found", step=step.name)
        ctx.artifact = artifact
        step.annotations["artifact"] = _rel(artifact, ctx.project.root)

    def _generate_bindings(self, ctx: BuildContext, step: BuildStep) -> None:
        if ctx.artifact is None:
            raise FilesystemError(ctx.staging_dir, "no compiled artifact to bind", step=step.name)
        cfg = self._settings.bindgen
        reset_dir(ctx.staging_dir, step=step.name)

        args = [str(ctx.artifact), "--target", cfg.target]
        if cfg.target == "no-modules":
            args += ["--no-modules-global", ctx.project.built_name]
        if not cfg.typescript:
            args.append("--no-typescript")
        args += ["--out-dir", str(ctx.staging_dir)]
        run_tool(cfg.program, args, step=step.name, cwd=ctx.project.root)

        ctx.bindings = sorted(p.name for p in ctx.staging_dir.iterdir() if p.is_file())
        step.annotations["files"] = len(ctx.bindings)

    def _bundle(self, ctx: BuildContext, step: BuildStep) -> None:
        cfg = self._settings.build
        with resolve_assets(
            ctx.project,
            self._settings.assets,
            js_path=ctx.js_path,
            client=self._release_client,
        ) as source:
            ctx.asset_origin = source.origin
            ctx.asset_release = source.release

            reset_dir(ctx.output_dir, step=step.name)
            assets = copy_assets(
                source.path,
                ctx.output_dir,
                placeholder=cfg.placeholder,
                replacement=ctx.project.built_name,
                step=step.name,
            )

        bindings = copy_assets(ctx.staging_dir, ctx.output_dir, step=step.name)
        ctx.bundled = sorted(set(assets) | set(bindings))
        step.annotations["files"] = len(ctx.bundled)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _report(
        self,
        machine: BuildStateMachine,
        steps: list[BuildStep],
        ctx: BuildContext | None,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "state": str(machine.state),
            "steps": [s.to_dict() for s in steps],
        }
        if ctx is None:
            return data

        root = ctx.project.root
        data.update(
            {
                "name": ctx.project.name,
                "profile": "release" if ctx.release else "debug",
                "output_dir": _rel(ctx.output_dir, root),
                "index": _rel(ctx.output_dir / "index.html", root),
                "files": ctx.bundled,
                "bindings": ctx.bindings,
            }
        )
        if ctx.asset_origin is not None:
            data["assets"] = ctx.asset_origin
        if ctx.asset_release is not None:
            data["asset_release"] = ctx.asset_release
        return data
