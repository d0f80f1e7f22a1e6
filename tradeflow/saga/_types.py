"""
Saga types — core data structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Callable, Awaitable, Iterator
from kungfu import LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Compensator — Undo Action
# ═══════════════════════════════════════════════════════════════════════════════

type CompensatorWithValue[T] = Callable[[T], Awaitable[None]]
"""Compensation function that receives the action result and undoes it."""

# ═══════════════════════════════════════════════════════════════════════════════
# SagaStep — Single Step with Compensation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaStep[T, E]:
    """
    A single saga step: action + compensator.

    When action succeeds, compensator is recorded in the log.
    If a later step fails, recorded compensators run.
    """

    action: LazyCoroResult[T, E]
    compensate: CompensatorWithValue[T] | None
    name: str = "step"


# ═══════════════════════════════════════════════════════════════════════════════
# Compensation Log — completed steps, append-only
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CompensationEntry[T]:
    """One completed step that can be undone."""

    name: str
    value: T
    compensate: CompensatorWithValue[T]


@dataclass(slots=True)
class CompensationLog[T]:
    """
    Ordered record of completed, compensatable steps.

    Entries are only ever appended; ``drain()`` hands them out once so the
    same step is never reversed twice.
    """

    _entries: list[CompensationEntry[T]] = field(default_factory=list)
    _drained: bool = False

    def record(self, name: str, value: T, compensate: CompensatorWithValue[T]) -> None:
        if self._drained:
            raise RuntimeError("compensation log already drained")
        self._entries.append(CompensationEntry(name, value, compensate))

    def drain(self) -> tuple[CompensationEntry[T], ...]:
        if self._drained:
            return ()
        self._drained = True
        return tuple(self._entries)

    @property
    def values(self) -> tuple[T, ...]:
        return tuple(e.value for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CompensationEntry[T]]:
        return iter(self._entries)


# ═══════════════════════════════════════════════════════════════════════════════
# Result Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaResult[T]:
    """Successful saga result with metadata."""

    value: T
    steps_executed: int
    compensators_recorded: int


@dataclass(frozen=True, slots=True)
class CompensationReport:
    """Outcome of a rollback."""

    run: int
    failed: int
    failed_steps: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return self.failed == 0


@dataclass(frozen=True, slots=True)
class SagaError[E]:
    """Saga error with rollback status."""

    error: E
    step_failed: int
    compensators_run: int
    compensators_failed: int
    rollback_complete: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "CompensationEntry",
    "CompensationLog",
    "CompensationReport",
    "SagaResult",
    "SagaError",
)
