"""Pari-mutuel payout engine — pure integer functions, no state.

Every division floors. The exact results are part of the contract: two
implementations given the same pools must pay the same amounts to the unit.
"""

from src.pm_common.enums import Outcome
from src.pm_common.units import (
    BPS_DENOMINATOR,
    bps_of,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
)
from src.pm_market.domain.models import Market
from src.pm_payout.domain.models import FeeBreakdown, Odds

EMPTY_MARKET_ODDS = Odds(yes_bps=5000, no_bps=5000)


def redistribute(bet_amount: int, winning_pool: int, losing_pool: int) -> int:
    """Gross winnings: the stake back plus its pro-rata share of the losing pool.

    winning_pool already includes bet_amount, so it is never zero for a real
    stake. A zero stake earns nothing.
    """
    if losing_pool == 0 or bet_amount == 0:
        return bet_amount
    share = checked_div(checked_mul(bet_amount, losing_pool), winning_pool)
    return checked_add(bet_amount, share)


def fees(gross: int, platform_fee_bps: int, creator_fee_bps: int) -> FeeBreakdown:
    """Split gross winnings into platform fee, creator fee and the winner's net."""
    platform_fee = bps_of(gross, platform_fee_bps)
    creator_fee = bps_of(gross, creator_fee_bps)
    net = checked_sub(checked_sub(gross, platform_fee), creator_fee)
    return FeeBreakdown(
        gross=gross, platform_fee=platform_fee, creator_fee=creator_fee, net=net
    )


def odds(yes_pool: int, no_pool: int) -> Odds:
    """Implied probabilities in basis points.

    The two sides are floored independently and may sum to less than 10000.
    """
    total = checked_add(yes_pool, no_pool)
    if total == 0:
        return EMPTY_MARKET_ODDS
    return Odds(
        yes_bps=checked_div(checked_mul(yes_pool, BPS_DENOMINATOR), total),
        no_bps=checked_div(checked_mul(no_pool, BPS_DENOMINATOR), total),
    )


def potential_winnings(market: Market, outcome: Outcome, amount: int) -> int:
    """What redistribute would pay if `amount` were staked on `outcome` right now."""
    winning_pool = checked_add(market.pool_for(outcome), amount)
    losing_pool = market.pool_for(outcome.opposite())
    return redistribute(amount, winning_pool, losing_pool)


def settle_claim(
    market: Market, stake: int, platform_fee_bps: int
) -> FeeBreakdown:
    """Full payout for a winning stake on a resolved market."""
    if market.outcome is None:
        raise ValueError(f"market {market.id} has no outcome")
    winning_pool = market.pool_for(market.outcome)
    losing_pool = market.pool_for(market.outcome.opposite())
    gross = redistribute(stake, winning_pool, losing_pool)
    return fees(gross, platform_fee_bps, market.creator_fee_bps)
