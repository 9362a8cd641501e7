"""Shared pytest fixtures and test helpers for wargo tests."""

from __future__ import annotations

import logging
import os
import stat
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from wargo.config.settings import WargoSettings

# Fake external tools. Each appends its argv to $FAKE_TOOL_LOG so tests can
# assert on invocation order.
FAKE_CARGO = """\
#!/bin/sh
set -e
[ -n "$FAKE_TOOL_LOG" ] && echo "cargo $*" >> "$FAKE_TOOL_LOG"
case "$1" in
  init)
    if [ -n "$FAKE_CARGO_INIT_FAIL" ]; then
      echo "error: destination already contains a package" >&2
      exit 101
    fi
    name=$(basename "$PWD")
    if [ "$3" = "--name" ]; then name="$4"; fi
    mkdir -p src
    printf '[package]\\nname = "%s"\\nversion = "0.1.0"\\nedition = "2018"\\n\\n[dependencies]\\n' \
      "$name" > Cargo.toml
    printf 'pub fn placeholder() {}\\n' > src/lib.rs
    ;;
  build)
    if [ "$FAKE_CARGO_FAIL" = "garbled" ]; then
      printf 'error: bad \\377 byte\\n' >&2
      exit 101
    fi
    if [ "$FAKE_CARGO_FAIL" = "tabbed" ]; then
      printf 'error:\\tunused\\r\\nline2\\n' >&2
      exit 101
    fi
    if [ -n "$FAKE_CARGO_FAIL" ]; then
      echo "   Compiling game v0.1.0"
      echo "error[E0425]: cannot find value \\`x\\` in this scope" >&2
      exit 101
    fi
    profile=debug
    for arg in "$@"; do
      if [ "$arg" = "--release" ]; then profile=release; fi
    done
    if [ -z "$FAKE_CARGO_NO_ARTIFACT" ]; then
      name=$(sed -n 's/^name = "\\(.*\\)"/\\1/p' Cargo.toml | head -n 1 | tr '-' '_')
      mkdir -p "target/wasm32-unknown-unknown/$profile"
      printf 'wasm' > "target/wasm32-unknown-unknown/$profile/$name.wasm"
    fi
    echo "    Finished $profile target(s)" >&2
    ;;
esac
"""

FAKE_BINDGEN = """\
#!/bin/sh
set -e
[ -n "$FAKE_TOOL_LOG" ] && echo "wasm-bindgen $*" >> "$FAKE_TOOL_LOG"
if [ -n "$FAKE_BINDGEN_FAIL" ]; then
  echo "error: failed to parse wasm module" >&2
  exit 1
fi
out=""
global=""
while [ $# -gt 0 ]; do
  case "$1" in
    --out-dir) out="$2"; shift ;;
    --no-modules-global) global="$2"; shift ;;
  esac
  shift
done
printf 'var %s = {};\\n' "$global" > "$out/$global.js"
printf 'bg' > "$out/${global}_bg.wasm"
"""

skip_on_windows = pytest.mark.skipif(sys.platform == "win32", reason="fake tools are sh scripts")


def _write_script(path: Path, body: str) -> None:
    path.write_text(body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host config, tokens and fake-tool switches out of every test."""
    for key in list(os.environ):
        if key.startswith(("WARGO_", "FAKE_")):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo the root handler swap done by ``configure_logging``."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    wargo_level = logging.getLogger("wargo").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("wargo").setLevel(wargo_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def tool_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """File the fake tools append their invocations to."""
    log = tmp_path / "tools.log"
    monkeypatch.setenv("FAKE_TOOL_LOG", str(log))
    return log


@pytest.fixture
def fake_tools(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, tool_log: Path) -> Path:
    """Put fake ``cargo`` and ``wasm-bindgen`` scripts first on PATH."""
    if sys.platform == "win32":
        pytest.skip("fake tools are sh scripts")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    _write_script(bin_dir / "cargo", FAKE_CARGO)
    _write_script(bin_dir / "wasm-bindgen", FAKE_BINDGEN)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return bin_dir


CARGO_LOCK = """\
# This file is automatically @generated by Cargo.
[[package]]
name = "my-game"
version = "0.1.0"
dependencies = [
 "wasm-bindgen 0.2.29 (registry+https://github.com/rust-lang/crates.io-index)",
 "wasm-rgame 0.1.3 (registry+https://github.com/rust-lang/crates.io-index)",
]

[[package]]
name = "wasm-bindgen"
version = "0.2.29"
source = "registry+https://github.com/rust-lang/crates.io-index"

[[package]]
name = "wasm-rgame"
version = "0.1.3"
source = "registry+https://github.com/rust-lang/crates.io-index"
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An initialized ``my-game`` crate with a Cargo.lock."""
    root = tmp_path / "my-game"
    (root / "src").mkdir(parents=True)
    (root / "Cargo.toml").write_text(
        '[package]\nname = "my-game"\nversion = "0.1.0"\n\n'
        '[dependencies]\nwasm-rgame = "0.1"\n',
        encoding="utf-8",
    )
    (root / "Cargo.lock").write_text(CARGO_LOCK, encoding="utf-8")
    (root / "src" / "lib.rs").write_text("pub fn start() {}\n", encoding="utf-8")
    return root


@pytest.fixture
def js_assets(tmp_path: Path) -> Path:
    """A local web asset directory with hidden entries and a placeholder."""
    assets = tmp_path / "wasm-rgame-js"
    (assets / "js").mkdir(parents=True)
    (assets / ".git").mkdir()
    (assets / "index.html").write_text(
        '<script src="$PROJECT_NAME.js"></script>\n'
        "<script>wasm_bindgen = $PROJECT_NAME;</script>\n",
        encoding="utf-8",
    )
    (assets / "js" / "app.js").write_text("run('$PROJECT_NAME');\n", encoding="utf-8")
    (assets / "favicon.ico").write_bytes(b"\x00\xff\xfe$PROJECT_NAME\x80")
    (assets / ".DS_Store").write_bytes(b"junk")
    (assets / ".git" / "config").write_text("[core]\n", encoding="utf-8")
    return assets


@pytest.fixture
def settings(project_dir: Path) -> WargoSettings:
    """Default settings rooted at ``project_dir``."""
    return WargoSettings.from_cli(project_root=project_dir)
