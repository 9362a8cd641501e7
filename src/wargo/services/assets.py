"""Web asset resolution for the bundle step.

Assets come from a local directory (``--js-path`` / ``[assets] js_path``)
or from the wasm-rgame-js release matching the engine version locked in
``Cargo.lock``. Downloads live in a temporary directory that is removed
when the context exits.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from wargo.config.models import AssetsConfig
from wargo.domain.errors import AssetResolutionError
from wargo.domain.project import LOCK_FILENAME, ProjectDescriptor
from wargo.domain.versions import Version, choose_version_by_key, find_locked_version
from wargo.infrastructure.releases import Release, ReleaseClient

logger = logging.getLogger(__name__)

STEP = "bundle"


@dataclass(frozen=True)
class AssetSource:
    """Where the bundle's static assets were taken from."""

    path: Path
    origin: str
    release: str | None = None


def release_client_for(config: AssetsConfig) -> ReleaseClient:
    """Build a ReleaseClient from the ``[assets]`` config section."""
    return ReleaseClient(
        config.repo_owner,
        config.repo_name,
        api_url=config.api_url,
        timeout=config.timeout,
        token=os.environ.get(config.token_env) or None,
    )


def locked_engine_version(project: ProjectDescriptor, package: str) -> Version:
    """Engine version pinned in the project's ``Cargo.lock``."""
    try:
        text = project.lock_path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot find / read {LOCK_FILENAME} in project directory ({exc.strerror or exc})"
        raise AssetResolutionError(msg, step=STEP) from exc

    version = find_locked_version(package, text)
    if version is None:
        msg = f"Cannot find {package} package in the {LOCK_FILENAME} file"
        raise AssetResolutionError(msg, step=STEP)
    return version


def choose_release(releases: list[Release], engine_version: Version) -> Release:
    """Greatest release whose tag version is ``<=`` *engine_version*."""
    if not releases:
        msg = "Found no releases for the web asset package"
        raise AssetResolutionError(msg, step=STEP)
    chosen = choose_version_by_key(engine_version, releases, lambda r: r.version)
    if chosen is None:
        msg = f"Found no asset release compatible with engine version {engine_version}"
        raise AssetResolutionError(msg, step=STEP)
    return chosen


@contextmanager
def resolve_assets(
    project: ProjectDescriptor,
    config: AssetsConfig,
    *,
    js_path: Path | None = None,
    client: ReleaseClient | None = None,
) -> Iterator[AssetSource]:
    """Yield an :class:`AssetSource` for *project*.

    A local *js_path* (or ``config.js_path``) wins; relative paths are
    resolved against the project root.
    """
    local = js_path or config.js_path
    if local is not None:
        local = local if local.is_absolute() else project.root / local
        if not local.is_dir():
            msg = f"Asset directory does not exist: {local}"
            raise AssetResolutionError(msg, step=STEP)
        logger.debug("Using local assets from %s", local)
        yield AssetSource(path=local, origin="local")
        return

    engine_version = locked_engine_version(project, config.engine_package)
    logger.info("Project uses %s %s", config.engine_package, engine_version)

    client = client or release_client_for(config)
    release = choose_release(client.list_releases(), engine_version)
    logger.info("Using %s release %s", client.slug, release.tag_name)

    with tempfile.TemporaryDirectory(prefix="wargo-assets-") as tmp:
        root = client.download(release, Path(tmp))
        yield AssetSource(path=root, origin="release", release=release.tag_name)
