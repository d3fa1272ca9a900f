"""MarketApplicationService — read-side composition layer.

All methods are read-only; no commit/rollback needed. Odds and potential
winnings are computed by the pure payout engine from the stored pools.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.domain.repository import PlatformConfigRepositoryProtocol
from src.pm_admin.infrastructure.persistence import PlatformConfigRepository
from src.pm_common.clock import SystemTickClock, TickClock
from src.pm_common.enums import Outcome
from src.pm_common.errors import InvalidAmountError, NotFoundError
from src.pm_common.pagination import cursor_decode, cursor_encode
from src.pm_common.units import AMOUNT_MAX
from src.pm_lifecycle.domain.guards import market_state
from src.pm_market.application.schemas import (
    MarketCountResponse,
    MarketDetail,
    MarketListItem,
    MarketListResponse,
    OddsResponse,
    PotentialWinningsResponse,
)
from src.pm_market.domain.models import Market
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_payout.domain.payout import fees, odds, potential_winnings


class MarketApplicationService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        platform: PlatformConfigRepositoryProtocol | None = None,
        clock: TickClock | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._platform: PlatformConfigRepositoryProtocol = (
            platform or PlatformConfigRepository()
        )
        self._clock: TickClock = clock or SystemTickClock()

    async def _require(self, db: AsyncSession, market_id: int) -> Market:
        market = await self._repo.get_market_by_id(db, market_id)
        if market is None:
            raise NotFoundError(f"market {market_id}")
        return market

    async def get_market(self, db: AsyncSession, market_id: int) -> MarketDetail:
        market = await self._require(db, market_id)
        now = self._clock.now()
        return MarketDetail.from_domain(market, market_state(market, now), now)

    async def list_markets(
        self, db: AsyncSession, cursor: str | None, limit: int
    ) -> MarketListResponse:
        cursor_id = cursor_decode(cursor)
        markets = await self._repo.list_markets(db, cursor_id, limit + 1)
        has_more = len(markets) > limit
        page = markets[:limit]

        now = self._clock.now()
        items = [MarketListItem.from_domain(m, market_state(m, now)) for m in page]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def get_total_markets(self, db: AsyncSession) -> MarketCountResponse:
        return MarketCountResponse(total_markets=await self._repo.count_markets(db))

    async def get_market_odds(self, db: AsyncSession, market_id: int) -> OddsResponse:
        market = await self._require(db, market_id)
        return OddsResponse.from_odds(market_id, odds(market.yes_pool, market.no_pool))

    async def get_potential_winnings(
        self, db: AsyncSession, market_id: int, outcome: object, amount: int
    ) -> PotentialWinningsResponse:
        side = Outcome.parse(outcome)
        if amount < 0:
            raise InvalidAmountError(f"{amount} must not be negative")
        market = await self._require(db, market_id)
        # total_pool + amount must still fit a persisted amount.
        if amount > AMOUNT_MAX - market.total_pool:
            raise InvalidAmountError(f"{amount} would overflow the market pool")
        gross = potential_winnings(market, side, amount)
        platform_fee_bps = await self._platform.get_platform_fee_bps(db)
        breakdown = fees(gross, platform_fee_bps, market.creator_fee_bps)
        return PotentialWinningsResponse.build(
            market, side.value, amount, platform_fee_bps, breakdown
        )
