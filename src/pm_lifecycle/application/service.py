"""MarketLifecycleService — every state-changing market operation.

Each public method is one unit of work: the market row is read FOR UPDATE,
the guards run against that snapshot, then positions, pools and host-ledger
transfers are written and committed together. Any exception rolls the whole
call back (see pm_common.database.atomic), so a failed transfer never leaves
a recorded position or a grown pool behind.

Guard order is fixed per operation; the first failing guard names the error.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_account.domain.constants import CUSTODY_ACCOUNT_ID
from src.pm_account.domain.repository import TransferGatewayProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_admin.domain.repository import PlatformConfigRepositoryProtocol
from src.pm_admin.infrastructure.persistence import PlatformConfigRepository
from src.pm_common.clock import SystemTickClock, TickClock
from src.pm_common.database import atomic
from src.pm_common.enums import Outcome, TransferReference
from src.pm_common.errors import InvalidAmountError, NotFoundError
from src.pm_common.units import checked_add
from src.pm_lifecycle.domain.guards import (
    check_bet_open,
    check_claimable,
    check_creator_can_resolve,
    check_emergency_window,
    check_fee_rate,
    check_owner,
    check_positive_amount,
    require_market,
)
from src.pm_lifecycle.domain.models import BetReceipt, ClaimReceipt
from src.pm_market.domain.models import Market, NewMarket
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_payout.domain.payout import settle_claim
from src.pm_position.domain.repository import PositionRepositoryProtocol
from src.pm_position.infrastructure.persistence import PositionRepository

logger = logging.getLogger(__name__)


class MarketLifecycleService:
    def __init__(
        self,
        markets: MarketRepositoryProtocol | None = None,
        positions: PositionRepositoryProtocol | None = None,
        platform: PlatformConfigRepositoryProtocol | None = None,
        transfers: TransferGatewayProtocol | None = None,
        clock: TickClock | None = None,
        owner_id: str | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = markets or MarketRepository()
        self._positions: PositionRepositoryProtocol = positions or PositionRepository()
        self._platform: PlatformConfigRepositoryProtocol = (
            platform or PlatformConfigRepository()
        )
        self._transfers: TransferGatewayProtocol = transfers or AccountRepository()
        self._clock: TickClock = clock or SystemTickClock()
        self._owner_id = settings.PLATFORM_OWNER_ID if owner_id is None else owner_id

    @property
    def owner_id(self) -> str:
        return self._owner_id

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    async def create_market(
        self,
        db: AsyncSession,
        creator: str,
        title: str,
        description: str,
        duration: int,
        resolution_window: int,
        creator_fee_bps: int,
    ) -> Market:
        """Open a market whose betting closes `duration` ticks from now."""
        check_fee_rate(creator_fee_bps)
        if duration < 0 or resolution_window < 0:
            raise InvalidAmountError(
                f"duration {duration} and resolution window {resolution_window} "
                "must be non-negative"
            )
        end_tick = checked_add(self._clock.now(), duration)
        resolution_tick = checked_add(end_tick, resolution_window)

        async with atomic(db):
            market = await self._markets.create(
                db,
                NewMarket(
                    creator=creator,
                    title=title,
                    description=description,
                    end_tick=end_tick,
                    resolution_tick=resolution_tick,
                    creator_fee_bps=creator_fee_bps,
                ),
            )

        logger.info(
            "Market created: id=%d creator=%s end_tick=%d resolution_tick=%d fee=%dbps",
            market.id,
            creator,
            end_tick,
            resolution_tick,
            creator_fee_bps,
        )
        return market

    # ------------------------------------------------------------------
    # bet
    # ------------------------------------------------------------------

    async def place_bet(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: int,
        outcome: object,
        amount: int,
    ) -> BetReceipt:
        check_positive_amount(amount)
        side = Outcome.parse(outcome)
        now = self._clock.now()

        async with atomic(db):
            market = require_market(
                await self._markets.get_market_for_update(db, market_id), market_id
            )
            check_bet_open(market, now)
            await self._transfers.transfer(
                db,
                amount,
                user_id,
                CUSTODY_ACCOUNT_ID,
                TransferReference.BET.value,
                str(market_id),
            )
            position = await self._positions.record_bet(db, market_id, user_id, side, amount)
            market.add_stake(side, amount)
            await self._markets.update_pools(db, market)

        logger.info(
            "Bet placed: market=%d user=%s outcome=%s amount=%d pools=(%d/%d)",
            market_id,
            user_id,
            side.value,
            amount,
            market.yes_pool,
            market.no_pool,
        )
        return BetReceipt(market=market, position=position)

    # ------------------------------------------------------------------
    # resolve
    # ------------------------------------------------------------------

    async def resolve(
        self, db: AsyncSession, caller: str, market_id: int, outcome: object
    ) -> Market:
        """Creator resolution, allowed from end_tick onwards."""
        side = Outcome.parse(outcome)
        now = self._clock.now()

        async with atomic(db):
            market = require_market(
                await self._markets.get_market_for_update(db, market_id), market_id
            )
            check_creator_can_resolve(market, caller, now)
            await self._markets.mark_resolved(db, market_id, side)

        market.resolved = True
        market.outcome = side
        logger.info("Market resolved: id=%d outcome=%s by creator", market_id, side.value)
        return market

    async def emergency_resolve(
        self, db: AsyncSession, caller: str, market_id: int, outcome: object
    ) -> Market:
        """Owner override once the creator's resolution window has lapsed."""
        check_owner(caller, self._owner_id)
        side = Outcome.parse(outcome)
        now = self._clock.now()

        async with atomic(db):
            market = require_market(
                await self._markets.get_market_for_update(db, market_id), market_id
            )
            check_emergency_window(market, now)
            await self._markets.mark_resolved(db, market_id, side)

        market.resolved = True
        market.outcome = side
        logger.info("Market resolved: id=%d outcome=%s by owner override", market_id, side.value)
        return market

    # ------------------------------------------------------------------
    # claim
    # ------------------------------------------------------------------

    async def claim(self, db: AsyncSession, user_id: str, market_id: int) -> ClaimReceipt:
        """Pay out the caller's winning stake.

        The position is deleted before any transfer is issued; a second claim
        for the same (market, user, outcome) finds nothing and fails NotFound.
        """
        async with atomic(db):
            market = require_market(
                await self._markets.get_market_for_update(db, market_id), market_id
            )
            check_claimable(market)
            winning = market.outcome
            assert winning is not None  # resolved implies outcome

            stake = await self._positions.remove_position(db, market_id, user_id, winning)
            if stake is None:
                raise NotFoundError(
                    f"winning position for user {user_id} in market {market_id}"
                )
            if stake <= 0:
                raise InvalidAmountError(f"stake {stake} on market {market_id}")

            platform_fee_bps = await self._platform.get_platform_fee_bps(db)
            breakdown = settle_claim(market, stake, platform_fee_bps)

            if breakdown.net > 0:
                await self._transfers.transfer(
                    db,
                    breakdown.net,
                    CUSTODY_ACCOUNT_ID,
                    user_id,
                    TransferReference.CLAIM_PAYOUT.value,
                    str(market_id),
                )
            if breakdown.creator_fee > 0:
                await self._transfers.transfer(
                    db,
                    breakdown.creator_fee,
                    CUSTODY_ACCOUNT_ID,
                    market.creator,
                    TransferReference.CREATOR_FEE.value,
                    str(market_id),
                )
            # platform_fee stays in custody

        logger.info(
            "Claim paid: market=%d user=%s stake=%d gross=%d net=%d creator_fee=%d platform_fee=%d",
            market_id,
            user_id,
            stake,
            breakdown.gross,
            breakdown.net,
            breakdown.creator_fee,
            breakdown.platform_fee,
        )
        return ClaimReceipt(
            market_id=market_id,
            user_id=user_id,
            outcome=winning,
            stake=stake,
            breakdown=breakdown,
            platform_fee_bps=platform_fee_bps,
        )
