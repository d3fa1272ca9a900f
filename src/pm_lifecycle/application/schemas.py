"""Request/response schemas for the mutating market endpoints."""

from pydantic import BaseModel, Field

from src.pm_common.units import AMOUNT_MAX
from src.pm_lifecycle.domain.models import BetReceipt, ClaimReceipt
from src.pm_market.domain.models import Market

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=256)
    description: str = Field("", max_length=1024)
    # Range checks on the integers are left to the service so they fail
    # with InvalidAmount rather than a schema error.
    duration: int = Field(..., le=AMOUNT_MAX, description="Ticks until betting closes")
    resolution_window: int = Field(
        ..., le=AMOUNT_MAX, description="Ticks after close reserved for the creator"
    )
    creator_fee_bps: int = Field(..., le=AMOUNT_MAX)


class PlaceBetRequest(BaseModel):
    # str or bool; Outcome.parse decides, so bad values surface as InvalidOutcome.
    outcome: str | bool
    amount: int = Field(..., le=AMOUNT_MAX)


class ResolveRequest(BaseModel):
    outcome: str | bool


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class MarketCreatedResponse(BaseModel):
    market_id: int
    end_tick: int
    resolution_tick: int

    @classmethod
    def from_domain(cls, m: Market) -> "MarketCreatedResponse":
        return cls(market_id=m.id, end_tick=m.end_tick, resolution_tick=m.resolution_tick)


class BetResponse(BaseModel):
    market_id: int
    outcome: str
    amount: int
    position_amount: int
    total_pool: int
    yes_pool: int
    no_pool: int

    @classmethod
    def from_receipt(cls, r: BetReceipt, amount: int) -> "BetResponse":
        return cls(
            market_id=r.market.id,
            outcome=r.position.outcome.value,
            amount=amount,
            position_amount=r.position.amount,
            total_pool=r.market.total_pool,
            yes_pool=r.market.yes_pool,
            no_pool=r.market.no_pool,
        )


class ResolveResponse(BaseModel):
    market_id: int
    outcome: str

    @classmethod
    def from_domain(cls, m: Market) -> "ResolveResponse":
        return cls(market_id=m.id, outcome=m.outcome.value if m.outcome else "")


class ClaimResponse(BaseModel):
    market_id: int
    outcome: str
    stake: int
    gross: int
    platform_fee: int
    creator_fee: int
    net_winnings: int
    platform_fee_bps: int

    @classmethod
    def from_receipt(cls, r: ClaimReceipt) -> "ClaimResponse":
        return cls(
            market_id=r.market_id,
            outcome=r.outcome.value,
            stake=r.stake,
            gross=r.breakdown.gross,
            platform_fee=r.breakdown.platform_fee,
            creator_fee=r.breakdown.creator_fee,
            net_winnings=r.breakdown.net,
            platform_fee_bps=r.platform_fee_bps,
        )
