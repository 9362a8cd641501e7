"""Error taxonomy for init and build operations.

Services catch these and convert them into a failed ``ServiceResult``
carrying ``code`` and ``detail()``. Nothing here is retried.

``step`` names the build or init step that failed. Lower layers may leave
it unset; the build pipeline fills it in for the step that was running.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class WargoError(Exception):
    """Base class for all expected wargo failures."""

    code = "WARGO_ERROR"

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.step = step

    def detail(self) -> dict[str, Any]:
        return {"step": self.step} if self.step else {}


class ExternalToolFailure(WargoError):
    """An external tool exited non-zero or could not be started.

    ``exit_code`` is None when the process never ran (missing binary).
    ``output`` holds the tool's combined stdout/stderr, verbatim.
    """

    code = "EXTERNAL_TOOL_FAILED"

    def __init__(
        self,
        step: str,
        command: list[str],
        exit_code: int | None,
        output: str,
        *,
        hint: str | None = None,
    ) -> None:
        if exit_code is None:
            message = f"{step}: could not run `{command[0]}`"
        else:
            message = f"{step}: `{command[0]}` exited with status {exit_code}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message, step=step)
        self.command = command
        self.exit_code = exit_code
        self.output = output

    def detail(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "command": " ".join(self.command),
            "exit_code": self.exit_code,
            "output": self.output,
        }


class FilesystemError(WargoError):
    """Reading, writing or copying a path failed."""

    code = "FILESYSTEM_ERROR"

    def __init__(self, path: Path, cause: str, *, step: str | None = None) -> None:
        prefix = f"{step}: " if step else ""
        super().__init__(f"{prefix}{cause} ({path})", step=step)
        self.path = path
        self.cause = cause

    def detail(self) -> dict[str, Any]:
        return {"path": str(self.path), "cause": self.cause, **super().detail()}


class ProjectError(WargoError):
    """The Cargo project is missing, malformed, or already initialized."""

    code = "PROJECT_NOT_FOUND"

    def __init__(self, message: str, *, path: Path, code: str | None = None) -> None:
        super().__init__(message)
        self.path = path
        if code is not None:
            self.code = code

    def detail(self) -> dict[str, Any]:
        return {"path": str(self.path), **super().detail()}


class AssetResolutionError(WargoError):
    """Web assets for the bundle could not be located or downloaded."""

    code = "ASSETS_UNAVAILABLE"
