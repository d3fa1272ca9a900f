"""Lifecycle state machine and authorization guards.

Every guard takes the freshly locked market snapshot and raises the
matching AppError subclass; none of them touch storage. Callers run them
in the documented order so the first failing condition decides the error.

    OPEN (now < end_tick) -> CLOSED (now >= end_tick) -> RESOLVED
"""

from src.pm_common.enums import MarketState
from src.pm_common.errors import (
    InvalidAmountError,
    MarketClosedError,
    MarketNotResolvedError,
    MarketResolvedError,
    NotFoundError,
    OwnerOnlyError,
    UnauthorizedError,
)
from src.pm_common.units import MAX_FEE_BPS
from src.pm_market.domain.models import Market


def market_state(market: Market, now: int) -> MarketState:
    if market.resolved:
        return MarketState.RESOLVED
    if now < market.end_tick:
        return MarketState.OPEN
    return MarketState.CLOSED


def require_market(market: Market | None, market_id: int) -> Market:
    if market is None:
        raise NotFoundError(f"market {market_id}")
    return market


def check_positive_amount(amount: int) -> None:
    if amount <= 0:
        raise InvalidAmountError(f"{amount} must be positive")


def check_fee_rate(rate_bps: int) -> None:
    if rate_bps < 0 or rate_bps > MAX_FEE_BPS:
        raise InvalidAmountError(f"fee rate {rate_bps} bps outside 0..{MAX_FEE_BPS}")


def check_owner(caller: str, owner_id: str) -> None:
    # An unset owner matches nobody.
    if not owner_id or caller != owner_id:
        raise OwnerOnlyError()


def check_bet_open(market: Market, now: int) -> None:
    if market.resolved:
        raise MarketResolvedError(market.id)
    if now >= market.end_tick:
        raise MarketClosedError(
            f"Market {market.id} stopped taking bets at tick {market.end_tick} (now {now})"
        )


def check_creator_can_resolve(market: Market, caller: str, now: int) -> None:
    if caller != market.creator:
        raise UnauthorizedError(f"Only the creator may resolve market {market.id}")
    if now < market.end_tick:
        raise MarketClosedError(
            f"Market {market.id} is still open until tick {market.end_tick} (now {now})"
        )
    if market.resolved:
        raise MarketResolvedError(market.id)


def check_emergency_window(market: Market, now: int) -> None:
    """Owner override only after the creator's resolution window has lapsed."""
    if now < market.resolution_tick:
        raise UnauthorizedError(
            f"Emergency resolution of market {market.id} not allowed before "
            f"tick {market.resolution_tick} (now {now})"
        )
    if market.resolved:
        raise MarketResolvedError(market.id)


def check_claimable(market: Market) -> None:
    if not market.resolved:
        raise MarketNotResolvedError(market.id)
