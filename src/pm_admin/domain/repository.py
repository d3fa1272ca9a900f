"""Repository Protocol for the platform configuration cell."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession


class PlatformConfigRepositoryProtocol(Protocol):
    async def get_platform_fee_bps(self, db: AsyncSession) -> int: ...

    async def set_platform_fee_bps(self, db: AsyncSession, rate_bps: int) -> None: ...
