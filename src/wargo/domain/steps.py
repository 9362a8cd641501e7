"""BuildStep — one ordered unit of work in a build."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from wargo.domain.states import BuildState, StepOutcome


@dataclass
class BuildStep:
    """A labelled build step and its outcome.

    Steps live only for the duration of one ``build`` invocation.
    """

    name: str
    label: str
    state: BuildState
    outcome: StepOutcome = StepOutcome.PENDING
    start_time: float | None = None
    end_time: float | None = None
    error: str | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def start(self) -> None:
        self.start_time = time.perf_counter()

    def succeed(self) -> None:
        self.end_time = time.perf_counter()
        self.outcome = StepOutcome.OK

    def fail(self, message: str) -> None:
        self.end_time = time.perf_counter()
        self.outcome = StepOutcome.FAILED
        self.error = message

    def skip(self) -> None:
        self.outcome = StepOutcome.SKIPPED

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "label": self.label,
            "state": str(self.state),
            "outcome": str(self.outcome),
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.error is not None:
            data["error"] = self.error
        if self.annotations:
            data["annotations"] = self.annotations
        return data


# Fixed total order of a build: compile -> bind -> bundle.
STEP_PLAN: tuple[tuple[str, str, BuildState], ...] = (
    ("compile", "Compile crate to WebAssembly", BuildState.COMPILING),
    ("bindgen", "Generate JavaScript bindings", BuildState.GENERATING_BINDINGS),
    ("bundle", "Bundle web assets", BuildState.BUNDLING),
)


def plan_steps() -> list[BuildStep]:
    """Fresh, pending steps in execution order."""
    return [BuildStep(name=name, label=label, state=state) for name, label, state in STEP_PLAN]
