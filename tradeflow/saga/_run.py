"""
Saga execution with automatic rollback.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from kungfu import Result, Ok, Error

from tradeflow.saga._types import (
    SagaStep,
    SagaResult,
    SagaError,
    CompensationLog,
    CompensationReport,
)
from tradeflow.saga.policy._compensate import CompensationPolicy, in_order

logger = logging.getLogger("tradeflow.saga")

# ═══════════════════════════════════════════════════════════════════════════════
# run_step() — Execute single step
# ═══════════════════════════════════════════════════════════════════════════════

async def run_step[T, E](
    step: SagaStep[T, E],
    log: CompensationLog[T],
) -> Result[T, E]:
    """Execute single step, recording compensator on success."""
    result = await step.action
    match result:
        case Ok(value):
            if step.compensate is not None:
                log.record(step.name, value, step.compensate)
            return Ok(value)
        case Error(e):
            return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# run_compensators() — Rollback
# ═══════════════════════════════════════════════════════════════════════════════

async def run_compensators[T](
    log: CompensationLog[T],
    policy: CompensationPolicy | None = None,
) -> CompensationReport:
    """
    Run every recorded compensator exactly once.

    A failing compensator is logged and counted; the loop always continues.
    """
    policy = policy or in_order()
    comp_run = 0
    failed: list[str] = []

    for entry in policy.arrange(log.drain()):
        try:
            await entry.compensate(entry.value)
            comp_run += 1
        except Exception:
            logger.exception("Compensation failed for %s", entry.name)
            failed.append(entry.name)

    return CompensationReport(run=comp_run, failed=len(failed), failed_steps=tuple(failed))


# ═══════════════════════════════════════════════════════════════════════════════
# run_sequence() — Execute steps one after another
# ═══════════════════════════════════════════════════════════════════════════════

async def run_sequence[T, E](
    steps: Sequence[SagaStep[T, E]],
    policy: CompensationPolicy | None = None,
    log: CompensationLog[T] | None = None,
) -> Result[SagaResult[tuple[T, ...]], SagaError[E]]:
    """
    Execute saga steps sequentially, stopping at the first failure.

    On failure every recorded compensator runs according to ``policy``
    (first-completed first by default) and a SagaError is returned.
    An exception escaping a step also triggers the rollback, then propagates.

    Pass ``log`` to observe the completed steps from outside.
    """
    log = log if log is not None else CompensationLog()
    values: list[T] = []

    for index, saga_step in enumerate(steps, start=1):
        try:
            result = await run_step(saga_step, log)
        except Exception:
            logger.exception("Saga step %s raised, rolling back", saga_step.name)
            await run_compensators(log, policy)
            raise

        match result:
            case Ok(value):
                values.append(value)
            case Error(error):
                logger.warning(
                    "Saga step %s failed, rolling back %d completed step(s)",
                    saga_step.name,
                    len(log),
                )
                report = await run_compensators(log, policy)
                return Error(SagaError(
                    error=error,
                    step_failed=index,
                    compensators_run=report.run,
                    compensators_failed=report.failed,
                    rollback_complete=report.complete,
                ))

    return Ok(SagaResult(
        value=tuple(values),
        steps_executed=len(values),
        compensators_recorded=len(log),
    ))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("run_sequence", "run_step", "run_compensators")
