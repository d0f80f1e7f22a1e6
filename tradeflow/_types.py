"""
Core types for tradeflow.

Re-exports from kungfu + the workflow body alias.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Async callables
# ═══════════════════════════════════════════════════════════════════════════════

type AsyncResultFn[T, E] = Callable[[], Awaitable[Result[T, E]]]
"""Zero-argument async function producing a Result (a workflow body)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "AsyncResultFn",
)
