"""
Commit configuration — behavior knobs for the order workflows.

Fluent builder pattern, chain methods to configure:

    config = (
        CommitConfig()
        .with_currency("EUR")
        .with_description(suffix="via Gallery", length=10)
        .with_settlement(SettlementPolicy(seller_pays_shipping=True))
    )

Note: Immutable — each method returns a new CommitConfig.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from types import MappingProxyType

from tradeflow.domain import OrderState


def utc_now() -> datetime:
    return datetime.now(UTC)


DEFAULT_STATE_EXPIRATIONS: Mapping[OrderState, timedelta] = MappingProxyType({
    OrderState.PENDING: timedelta(days=2),
    OrderState.SUBMITTED: timedelta(days=2),
    OrderState.APPROVED: timedelta(days=7),
})


# ═══════════════════════════════════════════════════════════════════════════════
# Settlement — buyer/seller split
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SettlementPolicy:
    """
    How the buyer total is split between marketplace and seller.

    withhold_remitted_tax: sales tax the marketplace remits itself is not
        paid out to the seller.
    seller_pays_shipping: shipping is absorbed by the seller instead of
        being passed through.
    """

    withhold_remitted_tax: bool = True
    seller_pays_shipping: bool = False

    def seller_total(
        self,
        *,
        buyer_total_cents: int,
        commission_fee_cents: int,
        shipping_total_cents: int,
        remitted_tax_cents: int,
    ) -> int:
        total = buyer_total_cents - commission_fee_cents
        if self.withhold_remitted_tax:
            total -= remitted_tax_cents
        if self.seller_pays_shipping:
            total -= shipping_total_cents
        return max(total, 0)


# ═══════════════════════════════════════════════════════════════════════════════
# CommitConfig — full configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CommitConfig:
    currency_code: str = "USD"
    description_suffix: str = "via Tradeflow"
    description_length: int = 12
    state_expirations: Mapping[OrderState, timedelta] = field(
        default_factory=lambda: DEFAULT_STATE_EXPIRATIONS
    )
    settlement: SettlementPolicy = field(default_factory=SettlementPolicy)
    clock: Callable[[], datetime] = utc_now

    def with_currency(self, currency_code: str) -> CommitConfig:
        return replace(self, currency_code=currency_code.upper())

    def with_description(
        self,
        *,
        suffix: str | None = None,
        length: int | None = None,
    ) -> CommitConfig:
        """
        Configure the charge description shown on statements.

        Example:
            .with_description(suffix="via Gallery")
            .with_description(length=8)
        """
        return replace(
            self,
            description_suffix=self.description_suffix if suffix is None else suffix,
            description_length=self.description_length if length is None else length,
        )

    def with_expiration(self, state: OrderState, delta: timedelta | None) -> CommitConfig:
        """Set (or clear, with None) how long an order may sit in ``state``."""
        expirations = dict(self.state_expirations)
        if delta is None:
            expirations.pop(state, None)
        else:
            expirations[state] = delta
        return replace(self, state_expirations=MappingProxyType(expirations))

    def with_settlement(self, settlement: SettlementPolicy) -> CommitConfig:
        return replace(self, settlement=settlement)

    def with_clock(self, clock: Callable[[], datetime]) -> CommitConfig:
        return replace(self, clock=clock)

    def expiration_for(self, state: OrderState) -> timedelta | None:
        return self.state_expirations.get(state)


DEFAULT_CONFIG = CommitConfig()


__all__ = (
    "utc_now",
    "DEFAULT_STATE_EXPIRATIONS",
    "SettlementPolicy",
    "CommitConfig",
    "DEFAULT_CONFIG",
)
