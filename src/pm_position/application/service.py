"""PositionApplicationService — read-only queries over the position ledger."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Outcome
from src.pm_common.errors import NotFoundError
from src.pm_position.application.schemas import PositionListResponse, PositionResponse
from src.pm_position.domain.repository import PositionRepositoryProtocol
from src.pm_position.infrastructure.persistence import PositionRepository


class PositionApplicationService:
    def __init__(self, repo: PositionRepositoryProtocol | None = None) -> None:
        self._repo: PositionRepositoryProtocol = repo or PositionRepository()

    async def get_position(
        self, db: AsyncSession, market_id: int, user_id: str, outcome: object
    ) -> PositionResponse:
        side = Outcome.parse(outcome)
        position = await self._repo.get_position(db, market_id, user_id, side)
        if position is None:
            raise NotFoundError(f"position ({market_id}, {user_id}, {side.value})")
        return PositionResponse.from_domain(position)

    async def list_positions(self, db: AsyncSession, user_id: str) -> PositionListResponse:
        positions = await self._repo.list_positions_for_user(db, user_id)
        return PositionListResponse(items=[PositionResponse.from_domain(p) for p in positions])
