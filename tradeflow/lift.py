"""
Lift — helpers for lifting values and collaborator calls into Results.

Built on combinators.lift.catching_async.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult, Result

from combinators.lift import catching_async


# ═══════════════════════════════════════════════════════════════════════════════
# tradeflow-specific helpers
# ═══════════════════════════════════════════════════════════════════════════════

def from_awaitable[T, E](
    awaitable_fn: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
) -> LazyCoroResult[T, E]:
    """
    Create LazyCoroResult from an async collaborator call.

    Anything the call raises is mapped through ``on_error``.
    """
    return catching_async(awaitable_fn, on_error=on_error)


async def call_collaborator[T, E](
    awaitable_fn: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
) -> Result[T, E]:
    """Run an async collaborator call now and return its Result."""
    return await from_awaitable(awaitable_fn, on_error)


__all__ = (
    "from_awaitable",
    "call_collaborator",
)
