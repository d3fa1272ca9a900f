"""Pydantic schemas for pm_market read-side API responses.

Amounts are raw integer units; odds are basis points (10000 = 100%).
"""

from pydantic import BaseModel

from src.pm_common.enums import MarketState
from src.pm_market.domain.models import Market
from src.pm_payout.domain.models import FeeBreakdown, Odds


class MarketListItem(BaseModel):
    id: int
    title: str
    creator: str
    state: str
    end_tick: int
    total_pool: int
    yes_pool: int
    no_pool: int
    outcome: str | None

    @classmethod
    def from_domain(cls, m: Market, state: MarketState) -> "MarketListItem":
        return cls(
            id=m.id,
            title=m.title,
            creator=m.creator,
            state=state.value,
            end_tick=m.end_tick,
            total_pool=m.total_pool,
            yes_pool=m.yes_pool,
            no_pool=m.no_pool,
            outcome=m.outcome.value if m.outcome else None,
        )


class MarketListResponse(BaseModel):
    items: list[MarketListItem]
    next_cursor: str | None
    has_more: bool


class MarketDetail(BaseModel):
    id: int
    creator: str
    title: str
    description: str
    state: str
    end_tick: int
    resolution_tick: int
    creator_fee_bps: int
    total_pool: int
    yes_pool: int
    no_pool: int
    resolved: bool
    outcome: str | None
    current_tick: int
    created_at: str | None

    @classmethod
    def from_domain(cls, m: Market, state: MarketState, now: int) -> "MarketDetail":
        return cls(
            id=m.id,
            creator=m.creator,
            title=m.title,
            description=m.description,
            state=state.value,
            end_tick=m.end_tick,
            resolution_tick=m.resolution_tick,
            creator_fee_bps=m.creator_fee_bps,
            total_pool=m.total_pool,
            yes_pool=m.yes_pool,
            no_pool=m.no_pool,
            resolved=m.resolved,
            outcome=m.outcome.value if m.outcome else None,
            current_tick=now,
            created_at=m.created_at.isoformat() if m.created_at else None,
        )


class MarketCountResponse(BaseModel):
    total_markets: int


class OddsResponse(BaseModel):
    market_id: int
    yes_bps: int
    no_bps: int

    @classmethod
    def from_odds(cls, market_id: int, o: Odds) -> "OddsResponse":
        return cls(market_id=market_id, yes_bps=o.yes_bps, no_bps=o.no_bps)


class PotentialWinningsResponse(BaseModel):
    """`gross` is the redistribution result; the fee fields estimate a claim
    at the platform rate in force right now, which may change before claim."""

    market_id: int
    outcome: str
    amount: int
    gross: int
    platform_fee_bps: int
    creator_fee_bps: int
    platform_fee: int
    creator_fee: int
    net: int

    @classmethod
    def build(
        cls,
        market: Market,
        outcome: str,
        amount: int,
        platform_fee_bps: int,
        breakdown: FeeBreakdown,
    ) -> "PotentialWinningsResponse":
        return cls(
            market_id=market.id,
            outcome=outcome,
            amount=amount,
            gross=breakdown.gross,
            platform_fee_bps=platform_fee_bps,
            creator_fee_bps=market.creator_fee_bps,
            platform_fee=breakdown.platform_fee,
            creator_fee=breakdown.creator_fee,
            net=breakdown.net,
        )
