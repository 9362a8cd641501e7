"""ProjectDescriptor and Cargo manifest parsing.

Only ``[package].name`` is read from ``Cargo.toml``; everything else in
the manifest belongs to cargo.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

MANIFEST_FILENAME = "Cargo.toml"
LOCK_FILENAME = "Cargo.lock"
ENTRYPOINT = Path("src") / "lib.rs"


class CargoPackage(BaseModel):
    """``[package]`` table, reduced to the fields wargo needs."""

    model_config = {"frozen": True, "extra": "ignore"}

    name: str
    version: str | None = None


class CargoManifest(BaseModel):
    """Root of a ``Cargo.toml`` document."""

    model_config = {"frozen": True, "extra": "ignore"}

    package: CargoPackage


def parse_manifest(text: str) -> CargoManifest:
    """Parse Cargo.toml *text*.

    Raises ``ValueError`` for invalid TOML or a missing ``[package].name``.
    """
    try:
        data: dict[str, Any] = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        msg = f"invalid TOML: {exc}"
        raise ValueError(msg) from exc
    try:
        return CargoManifest.model_validate(data)
    except ValidationError as exc:
        msg = "missing [package] name"
        raise ValueError(msg) from exc


def built_name(name: str) -> str:
    """Name cargo gives the compiled artifact (``-`` becomes ``_``)."""
    return name.replace("-", "_")


class ProjectDescriptor(BaseModel):
    """A wasm-rgame Cargo project on disk.

    Attributes:
        root: Project directory (holds ``Cargo.toml``).
        name: Package name from the manifest.
        entrypoint: Library entrypoint, relative to *root*.
    """

    model_config = {"frozen": True}

    root: Path
    name: str
    entrypoint: Path = ENTRYPOINT

    @property
    def built_name(self) -> str:
        return built_name(self.name)

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILENAME

    @property
    def lock_path(self) -> Path:
        return self.root / LOCK_FILENAME

    @property
    def entrypoint_path(self) -> Path:
        return self.root / self.entrypoint

    def wasm_artifact(self, target: str, *, release: bool = False) -> Path:
        """Path of the ``.wasm`` file cargo produces for *target*."""
        profile = "release" if release else "debug"
        return self.root / "target" / target / profile / f"{self.built_name}.wasm"
