# src/pm_admin/application/service.py
"""Admin application service: platform fee cell and invariant verification.

Every method is owner-only. The owner identity comes from settings
(PLATFORM_OWNER_ID) unless injected.
"""
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_account.domain.constants import CUSTODY_ACCOUNT_ID
from src.pm_admin.domain.repository import PlatformConfigRepositoryProtocol
from src.pm_admin.infrastructure.persistence import PlatformConfigRepository
from src.pm_common.database import atomic
from src.pm_common.enums import Outcome
from src.pm_lifecycle.domain.guards import check_fee_rate, check_owner
from src.pm_position.domain.repository import PositionRepositoryProtocol
from src.pm_position.infrastructure.persistence import PositionRepository

logger = logging.getLogger(__name__)

_LIST_MARKETS_SQL = text("""
    SELECT id, total_pool, yes_pool, no_pool, resolved, outcome
    FROM markets
    ORDER BY id
""")
_CUSTODY_BALANCE_SQL = text("SELECT balance FROM accounts WHERE user_id = :user_id")


class AdminService:
    def __init__(
        self,
        platform: PlatformConfigRepositoryProtocol | None = None,
        positions: PositionRepositoryProtocol | None = None,
        owner_id: str | None = None,
    ) -> None:
        self._platform: PlatformConfigRepositoryProtocol = (
            platform or PlatformConfigRepository()
        )
        self._positions: PositionRepositoryProtocol = positions or PositionRepository()
        self._owner_id = settings.PLATFORM_OWNER_ID if owner_id is None else owner_id

    async def set_platform_fee_rate(
        self, db: AsyncSession, caller: str, rate_bps: int
    ) -> int:
        check_owner(caller, self._owner_id)
        check_fee_rate(rate_bps)
        async with atomic(db):
            await self._platform.set_platform_fee_bps(db, rate_bps)
        logger.info("Platform fee rate set to %d bps", rate_bps)
        return rate_bps

    async def get_platform_fee_rate(self, db: AsyncSession) -> int:
        return await self._platform.get_platform_fee_bps(db)

    async def verify_all_invariants(
        self, db: AsyncSession, caller: str
    ) -> dict[str, object]:
        """Check every market against its stored pools and the position ledger.

        Per market:
          total_pool == yes_pool + no_pool
          outcome present iff resolved
          unresolved: each side pool == sum of that side's positions
        Global:
          custody balance >= sum of unresolved total pools
        """
        check_owner(caller, self._owner_id)
        violations: list[str] = []
        unresolved_total = 0

        rows = (await db.execute(_LIST_MARKETS_SQL)).fetchall()
        for row in rows:
            if row.total_pool != row.yes_pool + row.no_pool:
                violations.append(
                    f"market {row.id}: total_pool({row.total_pool}) != "
                    f"yes_pool({row.yes_pool}) + no_pool({row.no_pool})"
                )
            if row.resolved != (row.outcome is not None):
                violations.append(
                    f"market {row.id}: resolved={row.resolved} but outcome={row.outcome}"
                )
            if row.resolved:
                continue

            unresolved_total += row.total_pool
            sums = await self._positions.sum_by_outcome(db, row.id)
            for side, pool in ((Outcome.YES, row.yes_pool), (Outcome.NO, row.no_pool)):
                if sums[side] != pool:
                    violations.append(
                        f"market {row.id}: {side.value} pool({pool}) != "
                        f"positions({sums[side]})"
                    )

        custody = (
            await db.execute(_CUSTODY_BALANCE_SQL, {"user_id": CUSTODY_ACCOUNT_ID})
        ).scalar_one_or_none() or 0
        if custody < unresolved_total:
            violations.append(
                f"custody balance({custody}) < unresolved pools({unresolved_total})"
            )

        for v in violations:
            logger.error("Invariant violated: %s", v)
        return {"ok": not violations, "markets_checked": len(rows), "violations": violations}
