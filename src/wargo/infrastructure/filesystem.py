"""Filesystem operations for project scaffolding and bundling.

Every OS-level failure is re-raised as :class:`FilesystemError` naming the
path, so callers only deal with the wargo error taxonomy.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from wargo.domain.errors import FilesystemError, ProjectError
from wargo.domain.project import MANIFEST_FILENAME, ProjectDescriptor, parse_manifest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Project loading
# ---------------------------------------------------------------------------


def load_project(root: Path) -> ProjectDescriptor:
    """Read ``Cargo.toml`` under *root* into a ProjectDescriptor."""
    manifest = root / MANIFEST_FILENAME
    try:
        text = manifest.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"Cannot find {MANIFEST_FILENAME} in project directory"
        raise ProjectError(msg, path=manifest) from exc
    except OSError as exc:
        raise FilesystemError(manifest, f"cannot read {MANIFEST_FILENAME}: {exc}") from exc

    try:
        parsed = parse_manifest(text)
    except ValueError as exc:
        msg = f"Cannot parse {MANIFEST_FILENAME}: {exc}"
        raise ProjectError(msg, path=manifest, code="INVALID_MANIFEST") from exc

    return ProjectDescriptor(root=root, name=parsed.package.name)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def write_file(path: Path, content: str, *, step: str | None = None) -> None:
    """Create or truncate *path* with *content*."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(path, f"failed to write: {exc}", step=step) from exc


def append_file(path: Path, content: str, *, step: str | None = None) -> None:
    """Append *content* to an existing file."""
    try:
        with path.open("a", encoding="utf-8") as fh:
            fh.write(content)
    except OSError as exc:
        raise FilesystemError(path, f"failed to append: {exc}", step=step) from exc


def reset_dir(path: Path, *, step: str | None = None) -> None:
    """Remove *path* (if present) and recreate it empty."""
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)
    except OSError as exc:
        raise FilesystemError(path, f"failed to reset directory: {exc}", step=step) from exc


# ---------------------------------------------------------------------------
# Bundling
# ---------------------------------------------------------------------------


def _substitute(path: Path, placeholder: str, replacement: str) -> bool:
    """Replace *placeholder* in a UTF-8 text file. Binary files are left alone."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return False
    if placeholder not in text:
        return False
    path.write_text(text.replace(placeholder, replacement), encoding="utf-8")
    return True


def copy_assets(
    source: Path,
    dest: Path,
    *,
    placeholder: str | None = None,
    replacement: str = "",
    step: str | None = None,
) -> list[str]:
    """Copy the non-hidden contents of *source* into *dest*.

    Directories are copied recursively; hidden files and directories are
    skipped at every level. When *placeholder* is given it is replaced by
    *replacement* in every copied text file.

    Returns the copied files as *dest*-relative POSIX paths, sorted.
    """
    if not source.is_dir():
        raise FilesystemError(source, "asset source is not a directory", step=step)

    copied: list[str] = []
    try:
        for src in sorted(source.rglob("*")):
            rel = src.relative_to(source)
            if any(part.startswith(".") for part in rel.parts):
                continue
            target = dest / rel
            if src.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(src, target)
            if placeholder:
                _substitute(target, placeholder, replacement)
            copied.append(rel.as_posix())
            logger.debug("Copied %s -> %s", src, target)
    except OSError as exc:
        path = Path(exc.filename) if exc.filename else source
        cause = f"failed to copy assets: {exc.strerror or exc}"
        raise FilesystemError(path, cause, step=step) from exc

    return sorted(copied)
