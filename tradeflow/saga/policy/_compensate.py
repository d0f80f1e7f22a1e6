"""
Compensation policies.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class InOrderPolicy:
    """Undo completed steps in the order they were made."""

    def arrange[T](self, entries: Sequence[T]) -> list[T]:
        return list(entries)


def in_order() -> InOrderPolicy:
    """Compensate first-completed step first."""
    return InOrderPolicy()


@dataclass(frozen=True, slots=True)
class ReversePolicy:
    """Undo completed steps last-in, first-out."""

    def arrange[T](self, entries: Sequence[T]) -> list[T]:
        return list(reversed(entries))


def reverse() -> ReversePolicy:
    """Compensate most recent step first."""
    return ReversePolicy()


type CompensationPolicy = InOrderPolicy | ReversePolicy


__all__ = (
    "InOrderPolicy",
    "in_order",
    "ReversePolicy",
    "reverse",
    "CompensationPolicy",
)
