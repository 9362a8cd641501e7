"""Locating ``wargo.toml``.

``WARGO_CONFIG`` names the file outright. Otherwise the nearest
``wargo.toml`` in the project directory or one of its parents is used,
so a workspace can share one file between several game crates.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "wargo.toml"
CONFIG_ENV_VAR = "WARGO_CONFIG"

logger = logging.getLogger(__name__)


def candidate_paths(start: Path) -> Iterator[Path]:
    """Possible config locations from *start* up to the root, nearest first."""
    start = start.resolve()
    for directory in (start, *start.parents):
        yield directory / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """The config file for a project rooted at *start* (default: cwd), if any."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        if path.is_file():
            return path
        logger.warning("%s=%s is not a file; using built-in defaults", CONFIG_ENV_VAR, path)
        return None

    return next((p for p in candidate_paths(start or Path.cwd()) if p.is_file()), None)
