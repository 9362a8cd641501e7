"""Build state machine.

A build walks ``idle -> compiling -> generating_bindings -> bundling -> done``.
``failed`` is terminal and reachable from every non-terminal state.
"""

from __future__ import annotations

from enum import StrEnum


class BuildState(StrEnum):
    """Lifecycle state of one ``build`` invocation."""

    IDLE = "idle"
    COMPILING = "compiling"
    GENERATING_BINDINGS = "generating_bindings"
    BUNDLING = "bundling"
    DONE = "done"
    FAILED = "failed"


class StepOutcome(StrEnum):
    """Outcome recorded on a single build step."""

    PENDING = "pending"
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


BUILD_TRANSITIONS: dict[str, list[str]] = {
    "idle": ["compiling", "failed"],
    "compiling": ["generating_bindings", "failed"],
    "generating_bindings": ["bundling", "failed"],
    "bundling": ["done", "failed"],
    "done": [],
    "failed": [],
}

TERMINAL_STATES = frozenset({BuildState.DONE, BuildState.FAILED})


def is_valid_transition(current: str, target: str) -> bool:
    """Check if moving a build from *current* to *target* is allowed."""
    return target in BUILD_TRANSITIONS.get(current, [])


class BuildStateMachine:
    """Tracks the current state of a build and rejects illegal moves."""

    def __init__(self) -> None:
        self._state = BuildState.IDLE
        self._history: list[BuildState] = [BuildState.IDLE]

    @property
    def state(self) -> BuildState:
        return self._state

    @property
    def history(self) -> list[BuildState]:
        return list(self._history)

    @property
    def finished(self) -> bool:
        return self._state in TERMINAL_STATES

    def advance(self, target: BuildState) -> None:
        """Move to *target*, raising ``ValueError`` on an illegal transition."""
        if not is_valid_transition(self._state, target):
            msg = f"Illegal build transition: {self._state} -> {target}"
            raise ValueError(msg)
        self._state = target
        self._history.append(target)

    def fail(self) -> None:
        """Move to ``failed`` from any non-terminal state."""
        self.advance(BuildState.FAILED)
