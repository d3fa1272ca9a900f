# src/pm_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Outcome
from src.pm_market.domain.models import Market, NewMarket


class MarketRepositoryProtocol(Protocol):
    async def create(self, db: AsyncSession, new: NewMarket) -> Market: ...

    async def get_market_by_id(
        self, db: AsyncSession, market_id: int
    ) -> Market | None: ...

    async def get_market_for_update(
        self, db: AsyncSession, market_id: int
    ) -> Market | None: ...

    async def count_markets(self, db: AsyncSession) -> int: ...

    async def list_markets(
        self, db: AsyncSession, cursor_id: int | None, limit: int
    ) -> list[Market]: ...

    async def update_pools(self, db: AsyncSession, market: Market) -> None: ...

    async def mark_resolved(
        self, db: AsyncSession, market_id: int, outcome: Outcome
    ) -> None: ...
