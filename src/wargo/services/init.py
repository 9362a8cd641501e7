"""InitService — scaffold a wasm-rgame crate.

Pipeline: CHECK -> CARGO INIT -> READ MANIFEST -> RENDER TEMPLATES -> REPORT

Running ``init`` on an already-initialized directory is an error
(``PROJECT_EXISTS``) and leaves the directory untouched.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import structlog

from wargo.domain.errors import FilesystemError, WargoError
from wargo.domain.project import MANIFEST_FILENAME, ProjectDescriptor
from wargo.infrastructure.filesystem import append_file, load_project, write_file
from wargo.infrastructure.process import run_tool
from wargo.infrastructure.templates import build_template_environment, render_template
from wargo.services.base import BaseService
from wargo.services.result import ServiceError, ServiceResult

log = structlog.get_logger(__name__)

STEP = "init"

# (template name, project-relative output path)
SOURCE_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("lib.rs.j2", "src/lib.rs"),
    ("bootstrap.rs.j2", "src/bootstrap.rs"),
    ("simple_box.rs.j2", "src/simple_box.rs"),
)
MANIFEST_TEMPLATE = "cargo_toml.append.j2"

_INIT_HINT = "Does the project already exist?"

_TABLE_HEADER = re.compile(r"(?m)^\s*\[([^\[\]]+)\]\s*$")


def _last_table(manifest_text: str) -> str | None:
    """Name of the last ``[table]`` header in a manifest, if any."""
    headers = _TABLE_HEADER.findall(manifest_text)
    return headers[-1].strip() if headers else None


class InitService(BaseService):
    """Creates new wasm-rgame projects."""

    def init_project(self, root: Path, *, name: str | None = None) -> ServiceResult:
        """Initialize *root* as a wasm-rgame project."""
        op = "init"
        warnings: list[str] = []
        root = root.resolve()

        if (root / MANIFEST_FILENAME).exists():
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="PROJECT_EXISTS",
                    message=f"{MANIFEST_FILENAME} already exists in {root}",
                    detail={"path": str(root / MANIFEST_FILENAME)},
                ),
            )

        try:
            project, files = self._scaffold(root, name)
        except WargoError as exc:
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))

        self._dispatch_event(
            "post_init",
            {"project_name": project.name, "root": str(project.root)},
            warnings,
        )
        log.info("init.done", project=project.name)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": project.name,
                "built_name": project.built_name,
                "root": str(project.root),
                "entrypoint": project.entrypoint.as_posix(),
                "files_written": files,
            },
            warnings=warnings,
        )

    def new_project(self, path: Path, *, name: str | None = None) -> ServiceResult:
        """Create directory *path* and initialize a project inside it."""
        path = path.resolve()
        try:
            path.mkdir(parents=True)
        except FileExistsError:
            err = FilesystemError(path, "destination already exists")
            return ServiceResult(ok=False, op="new", error=ServiceError.from_exception(err))
        except OSError as exc:
            err = FilesystemError(path, f"could not create directory: {exc.strerror or exc}")
            return ServiceResult(ok=False, op="new", error=ServiceError.from_exception(err))

        result = self.init_project(path, name=name)
        return result.model_copy(update={"op": "new"})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _scaffold(self, root: Path, name: str | None) -> tuple[ProjectDescriptor, list[str]]:
        args = ["init", "--lib"]
        if name:
            args += ["--name", name]

        log.info("init.cargo", root=str(root))
        run_tool(self._settings.cargo.program, args, step=STEP, cwd=root, hint=_INIT_HINT)

        project = load_project(root)

        env = build_template_environment("init", project_root=root)
        context: dict[str, Any] = {
            "project_name": project.name,
            "built_name": project.built_name,
            "engine_version": self._settings.init.engine_version,
            "bindgen_version": self._settings.init.bindgen_version,
        }

        files: list[str] = []
        for template_name, rel_path in SOURCE_TEMPLATES:
            rendered = render_template(env, template_name, context, step=STEP)
            write_file(root / rel_path, rendered, step=STEP)
            files.append(rel_path)

        try:
            manifest_text = project.manifest_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(project.manifest_path, f"cannot read: {exc}", step=STEP) from exc
        context["needs_dependencies_header"] = _last_table(manifest_text) != "dependencies"
        block = render_template(env, MANIFEST_TEMPLATE, context, step=STEP)
        if manifest_text and not manifest_text.endswith("\n"):
            block = "\n" + block
        append_file(project.manifest_path, block, step=STEP)
        files.append(MANIFEST_FILENAME)

        return project, files
