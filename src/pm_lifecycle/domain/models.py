"""Results returned by the lifecycle service."""

from dataclasses import dataclass

from src.pm_common.enums import Outcome
from src.pm_market.domain.models import Market
from src.pm_payout.domain.models import FeeBreakdown
from src.pm_position.domain.models import Position


@dataclass(frozen=True)
class BetReceipt:
    market: Market
    position: Position


@dataclass(frozen=True)
class ClaimReceipt:
    market_id: int
    user_id: str
    outcome: Outcome
    stake: int
    breakdown: FeeBreakdown
    platform_fee_bps: int
