"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Outcome
from src.pm_position.domain.models import Position


class PositionRepositoryProtocol(Protocol):
    async def record_bet(
        self,
        db: AsyncSession,
        market_id: int,
        user_id: str,
        outcome: Outcome,
        amount: int,
    ) -> Position: ...

    async def get_position(
        self, db: AsyncSession, market_id: int, user_id: str, outcome: Outcome
    ) -> Position | None: ...

    async def remove_position(
        self, db: AsyncSession, market_id: int, user_id: str, outcome: Outcome
    ) -> int | None: ...

    async def list_positions_for_user(
        self, db: AsyncSession, user_id: str
    ) -> list[Position]: ...

    async def sum_by_outcome(
        self, db: AsyncSession, market_id: int
    ) -> dict[Outcome, int]: ...
