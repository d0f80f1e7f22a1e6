"""
Saga execution policies.

Namespace: S.policy.*

Examples:
    S.run_sequence(steps, S.policy.compensate.in_order())
    S.run_sequence(steps, S.policy.compensate.reverse())
"""

from __future__ import annotations

from tradeflow.saga.policy._compensate import (
    CompensationPolicy,
    InOrderPolicy,
    ReversePolicy,
    in_order,
    reverse,
)


# Namespace objects
class compensate:
    """Compensation policies."""

    in_order = staticmethod(in_order)
    reverse = staticmethod(reverse)


__all__ = (
    "compensate",
    "CompensationPolicy",
    "InOrderPolicy",
    "ReversePolicy",
)
