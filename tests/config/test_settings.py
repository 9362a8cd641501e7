"""Tests for WargoSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from wargo.config.models import CargoConfig
from wargo.config.settings import WargoSettings


class TestWargoSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = WargoSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path.resolve()
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.cargo.program == "cargo"
        assert settings.cargo.target == "wasm32-unknown-unknown"
        assert settings.bindgen.target == "no-modules"
        assert settings.build.release is False
        assert settings.build.output_dir == Path("target/wasm-rgame")
        assert settings.build.placeholder == "$PROJECT_NAME"
        assert settings.assets.js_path is None
        assert settings.assets.repo_owner == "DarrenTsung"
        assert settings.assets.repo_name == "wasm-rgame-js"
        assert settings.init.engine_version == "0.1"
        assert settings.plugins.enabled is True

    def test_project_root_defaults_to_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert WargoSettings.from_cli().project_root == tmp_path.resolve()

    def test_frozen(self, tmp_path: Path) -> None:
        settings = WargoSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "wargo.toml").write_text(
            '[bindgen]\nprogram = "/opt/wasm-bindgen"\n[build]\nrelease = true\n'
        )
        settings = WargoSettings.from_cli(project_root=tmp_path)
        assert settings.bindgen.program == "/opt/wasm-bindgen"
        assert settings.build.release is True
        assert settings.build.placeholder == "$PROJECT_NAME"  # default preserved
        assert settings.config_path == tmp_path.resolve() / "wargo.toml"

    def test_walks_up_from_project_root(self, tmp_path: Path) -> None:
        (tmp_path / "wargo.toml").write_text('[assets]\njs_path = "web"\n')
        nested = tmp_path / "games" / "pong"
        nested.mkdir(parents=True)
        settings = WargoSettings.from_cli(project_root=nested)
        assert settings.assets.js_path == Path("web")

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[cargo]\nprogram = "cross"\n')
        settings = WargoSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.cargo.program == "cross"
        assert settings.config_path == custom

    def test_missing_explicit_config_uses_defaults(self, tmp_path: Path) -> None:
        settings = WargoSettings.from_cli(
            config_path=str(tmp_path / "nope.toml"), project_root=tmp_path
        )
        assert settings.config_path is None
        assert settings.cargo.program == "cargo"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "wargo.toml").write_text("[build\nrelease = ")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            WargoSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "wargo.toml").write_text('[cargo]\nprogram = "from-toml"\n')
        monkeypatch.setenv("WARGO_CARGO__PROGRAM", "from-env")
        settings = WargoSettings.from_cli(project_root=tmp_path)
        assert settings.cargo.program == "from-env"

    def test_cli_flags_override_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("WARGO_VERBOSE", "false")
        settings = WargoSettings.from_cli(project_root=tmp_path, verbose=True, json_output=True)
        assert settings.verbose is True
        assert settings.json_output is True

    def test_section_kwargs(self, tmp_path: Path) -> None:
        settings = WargoSettings.from_cli(
            project_root=tmp_path, cargo=CargoConfig(program="fake-cargo")
        )
        assert settings.cargo.program == "fake-cargo"
