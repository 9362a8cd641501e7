"""Blocking execution of external tools (cargo, wasm-bindgen).

Every call waits for the child to exit. ``subprocess.run`` kills the
child if the wait is interrupted, so Ctrl-C never leaves a tool running.
Output is captured as bytes and decoded as UTF-8 without newline
translation; undecodable bytes become U+FFFD.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from wargo.domain.errors import ExternalToolFailure

logger = logging.getLogger(__name__)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def format_output(stdout: str, stderr: str) -> str:
    """Combine a tool's streams for display, stdout first."""
    parts: list[str] = []
    if stdout.strip():
        parts.append(f"Stdout:\n{stdout.rstrip()}")
    if stderr.strip():
        parts.append(f"Stderr:\n{stderr.rstrip()}")
    return "\n\n".join(parts)


def run_tool(
    program: str,
    args: Sequence[str],
    *,
    step: str,
    cwd: Path,
    hint: str | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run ``program args...`` in *cwd*, raising on failure.

    Raises:
        ExternalToolFailure: the program is missing, could not start, or
            exited non-zero. ``output`` carries its stdout/stderr verbatim.
    """
    command = [program, *args]
    logger.debug("Running %s (step=%s, cwd=%s)", " ".join(command), step, cwd)
    try:
        raw = subprocess.run(command, cwd=cwd, capture_output=True, check=False)
    except OSError as exc:
        raise ExternalToolFailure(step, command, None, str(exc), hint=hint) from exc

    completed = subprocess.CompletedProcess(
        raw.args, raw.returncode, _decode(raw.stdout), _decode(raw.stderr)
    )

    if completed.returncode != 0:
        raise ExternalToolFailure(
            step,
            command,
            completed.returncode,
            format_output(completed.stdout, completed.stderr),
            hint=hint,
        )
    return completed
