"""
Saga step creation.
"""

from __future__ import annotations

from kungfu import LazyCoroResult

from tradeflow.saga._types import SagaStep, CompensatorWithValue

# ═══════════════════════════════════════════════════════════════════════════════
# step() — Primary Constructor
# ═══════════════════════════════════════════════════════════════════════════════


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: CompensatorWithValue[T] | None = None,
    *,
    name: str = "step",
) -> SagaStep[T, E]:
    """
    Create a compensated saga step.

    Args:
        action: The operation to perform (LazyCoroResult)
        compensate: The compensation action if rollback needed
        name: Label used in logs and compensation reports

    Example:
        from tradeflow import saga as S

        deduct = S.step(
            action=coordinator.deduct_lazy(line_item),
            compensate=coordinator.undeduct,
            name=f"deduct:{line_item.id}",
        )
    """
    return SagaStep(action=action, compensate=compensate, name=name)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("step",)
