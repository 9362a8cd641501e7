"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, wargo.toml only contains overrides.
Most projects need no wargo.toml at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

# --- wargo.toml sections ---


class CargoConfig(BaseModel):
    """[cargo] section."""

    model_config = {"frozen": True}

    program: str = "cargo"
    target: str = "wasm32-unknown-unknown"


class BindgenConfig(BaseModel):
    """[bindgen] section."""

    model_config = {"frozen": True}

    program: str = "wasm-bindgen"
    target: str = "no-modules"
    typescript: bool = False


class BuildConfig(BaseModel):
    """[build] section.

    Directories are relative to the project root.
    """

    model_config = {"frozen": True}

    release: bool = False
    output_dir: Path = Path("target/wasm-rgame")
    staging_dir: Path = Path("target/wargo/bindgen")
    placeholder: str = "$PROJECT_NAME"


class AssetsConfig(BaseModel):
    """[assets] section — where the wasm-rgame-js web assets come from."""

    model_config = {"frozen": True}

    js_path: Path | None = None
    engine_package: str = "wasm-rgame"
    repo_owner: str = "DarrenTsung"
    repo_name: str = "wasm-rgame-js"
    api_url: str = "https://api.github.com"
    timeout: float = 30.0
    token_env: str = "GITHUB_TOKEN"


class InitConfig(BaseModel):
    """[init] section — dependency versions written into new projects."""

    model_config = {"frozen": True}

    engine_version: str = "0.1"
    bindgen_version: str = "0.2"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
