"""PlatformConfigRepository — the single platform_config row.

The fee rate is read on every claim and never cached, so a rate change
applies to every claim committed after it.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.errors import InternalError

_GET_FEE_SQL = text("SELECT platform_fee_bps FROM platform_config WHERE id = 1")

_SET_FEE_SQL = text("""
    UPDATE platform_config
    SET platform_fee_bps = :rate_bps, updated_at = NOW()
    WHERE id = 1
    RETURNING platform_fee_bps
""")


class PlatformConfigRepository:
    async def get_platform_fee_bps(self, db: AsyncSession) -> int:
        rate = (await db.execute(_GET_FEE_SQL)).scalar_one_or_none()
        if rate is None:
            raise InternalError("platform_config row missing (run migrations)")
        return int(rate)

    async def set_platform_fee_bps(self, db: AsyncSession, rate_bps: int) -> None:
        row = (await db.execute(_SET_FEE_SQL, {"rate_bps": rate_bps})).fetchone()
        if row is None:
            raise InternalError("platform_config row missing (run migrations)")
