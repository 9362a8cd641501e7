"""Jinja2 templates for the files ``wargo init`` writes.

Packaged templates live in ``wargo/templates/<group>/``. A project
overrides one by placing a file of the same name in
``.wargo/templates/<group>/`` or directly in ``.wargo/templates/``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
)

from wargo.domain.errors import FilesystemError

OVERRIDE_DIR = Path(".wargo") / "templates"


def override_dirs(project_root: Path, group: str) -> list[Path]:
    """Project override directories for *group*, most specific first."""
    base = project_root / OVERRIDE_DIR
    return [base / group, base]


def build_template_environment(group: str, *, project_root: Path | None = None) -> Environment:
    """Environment that prefers project overrides over the packaged templates.

    Undefined variables raise instead of rendering as empty strings.
    """
    loaders: list[BaseLoader] = []
    if project_root is not None:
        loaders.append(FileSystemLoader(override_dirs(project_root, group)))
    loaders.append(PackageLoader("wargo", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_template(env: Environment, name: str, context: dict[str, Any], *, step: str) -> str:
    """Render template *name*.

    Raises:
        FilesystemError: the template is missing or fails to render.
    """
    try:
        return env.get_template(name).render(**context)
    except TemplateError as exc:
        raise FilesystemError(Path(name), f"template error: {exc}", step=step) from exc
