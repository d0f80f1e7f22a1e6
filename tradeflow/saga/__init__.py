"""
Saga — multi-service workflows with compensation.

    from tradeflow import saga as S

    steps = [S.step(deduct(li), compensate=undeduct) for li in line_items]
    result = await S.run_sequence(steps, S.policy.compensate.in_order())
"""

from __future__ import annotations

from tradeflow.saga._types import (
    CompensatorWithValue,
    SagaStep,
    CompensationEntry,
    CompensationLog,
    CompensationReport,
    SagaResult,
    SagaError,
)
from tradeflow.saga._step import step
from tradeflow.saga._run import run_sequence, run_step, run_compensators
from tradeflow.saga import policy

__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "CompensationEntry",
    "CompensationLog",
    "CompensationReport",
    "SagaResult",
    "SagaError",
    "step",
    "run_sequence",
    "run_step",
    "run_compensators",
    "policy",
)
