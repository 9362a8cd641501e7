"""Tests for Rich renderers and output formatting."""

from __future__ import annotations

import json

from wargo.output.formatters import OutputSettings, format_result
from wargo.output.renderers import render_quiet, render_result
from wargo.services.result import ServiceError, ServiceResult

STEPS_OK = [
    {"name": "compile", "label": "Compile crate to WebAssembly", "outcome": "ok",
     "duration_ms": 812.4, "annotations": {"artifact": "target/x.wasm"}},
    {"name": "bindgen", "label": "Generate JavaScript bindings", "outcome": "ok",
     "duration_ms": 95.0},
    {"name": "bundle", "label": "Bundle web assets", "outcome": "ok", "duration_ms": 3.2},
]

BUILD_OK = ServiceResult(
    ok=True,
    op="build",
    data={
        "state": "done",
        "steps": STEPS_OK,
        "name": "my-game",
        "profile": "debug",
        "output_dir": "target/wasm-rgame/my-game",
        "index": "target/wasm-rgame/my-game/index.html",
        "files": ["index.html", "my_game.js"],
        "assets": "local",
    },
)

TOOL_OUTPUT = "Stdout:\n   Compiling my-game\n\nStderr:\nerror[E0425]: cannot find value `x`"

BUILD_FAILED = ServiceResult(
    ok=False,
    op="build",
    data={
        "state": "failed",
        "name": "my-game",
        "steps": [
            {"name": "compile", "label": "Compile crate to WebAssembly", "outcome": "failed",
             "duration_ms": 40.0},
            {"name": "bindgen", "label": "Generate JavaScript bindings", "outcome": "skipped",
             "duration_ms": 0.0},
            {"name": "bundle", "label": "Bundle web assets", "outcome": "skipped",
             "duration_ms": 0.0},
        ],
    },
    error=ServiceError(
        code="EXTERNAL_TOOL_FAILED",
        message="compile: `cargo` exited with status 101",
        detail={"step": "compile", "command": "cargo build", "exit_code": 101,
                "output": TOOL_OUTPUT},
    ),
)


class TestRenderBuild:
    def test_success(self) -> None:
        text = render_result(BUILD_OK)
        assert text.startswith("OK  build")
        assert "target/wasm-rgame/my-game/index.html" in text
        assert "Compile crate to WebAssembly" in text
        assert "812ms" in text
        assert "files: 2" in text
        assert "artifact=" not in text

    def test_verbose_adds_detail(self) -> None:
        text = render_result(BUILD_OK, verbose=True)
        assert "artifact=target/x.wasm" in text
        assert "my_game.js" in text

    def test_failure_prints_tool_output_verbatim(self) -> None:
        text = render_result(BUILD_FAILED)
        assert "ERROR  build" in text
        assert "exited with status 101" in text
        assert TOOL_OUTPUT in text
        assert "skipped" in text

    def test_failure_output_keeps_tabs_and_carriage_returns(self) -> None:
        raw = "Stderr:\na\tb\r\nline2"
        failed = BUILD_FAILED.model_copy(
            update={
                "error": BUILD_FAILED.error.model_copy(
                    update={"detail": {**BUILD_FAILED.error.detail, "output": raw}}
                )
            }
        )
        assert render_result(failed).endswith("\n\n" + raw)
        assert render_quiet(failed).endswith("\n" + raw)

    def test_failure_detail_only_when_verbose(self) -> None:
        assert "exit_code: 101" not in render_result(BUILD_FAILED)
        assert "exit_code: 101" in render_result(BUILD_FAILED, verbose=True)


class TestRenderInit:
    def test_init(self) -> None:
        result = ServiceResult(
            ok=True,
            op="init",
            data={
                "name": "pong",
                "root": "/tmp/pong",
                "entrypoint": "src/lib.rs",
                "files_written": ["src/lib.rs", "Cargo.toml"],
            },
        )
        text = render_result(result)
        assert text.startswith("OK  init")
        assert "name: pong" in text
        assert "files_written: 2" in text
        assert "Run wargo build next to get started!" in text

    def test_new_uses_init_renderer(self) -> None:
        result = ServiceResult(ok=True, op="new", data={"name": "pong", "files_written": []})
        assert "wargo build" in render_result(result)

    def test_project_exists_error(self) -> None:
        result = ServiceResult(
            ok=False,
            op="init",
            error=ServiceError(code="PROJECT_EXISTS", message="Cargo.toml already exists"),
        )
        assert render_result(result) == "ERROR  init — Cargo.toml already exists"


def test_generic_renderer() -> None:
    result = ServiceResult(ok=True, op="custom", data={"a": 1, "b": [1, 2]})
    text = render_result(result)
    assert "a: 1" in text
    assert "b: [1,2]" in text


class TestQuiet:
    def test_ok(self) -> None:
        assert render_quiet(BUILD_OK) == "OK: build"

    def test_error(self) -> None:
        assert render_quiet(BUILD_FAILED) == (
            "ERROR: build — compile: `cargo` exited with status 101\n" + TOOL_OUTPUT
        )

    def test_error_without_tool_output(self) -> None:
        result = ServiceResult(
            ok=False,
            op="init",
            error=ServiceError(code="PROJECT_EXISTS", message="Cargo.toml already exists"),
        )
        assert render_quiet(result) == "ERROR: init — Cargo.toml already exists"


class TestFormatResult:
    def test_json(self) -> None:
        text = format_result(BUILD_OK, settings=OutputSettings(json_output=True))
        assert json.loads(text)["data"]["index"] == "target/wasm-rgame/my-game/index.html"

    def test_json_beats_quiet(self) -> None:
        text = format_result(BUILD_OK, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(text)["ok"] is True

    def test_quiet(self) -> None:
        assert format_result(BUILD_OK, settings=OutputSettings(quiet=True)) == "OK: build"

    def test_default_is_rich(self) -> None:
        assert format_result(BUILD_OK).startswith("OK  build")
