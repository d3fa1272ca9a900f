"""Pydantic schemas for pm_position API responses."""

from pydantic import BaseModel

from src.pm_position.domain.models import Position


class PositionResponse(BaseModel):
    market_id: int
    user_id: str
    outcome: str
    amount: int
    updated_at: str | None

    @classmethod
    def from_domain(cls, p: Position) -> "PositionResponse":
        return cls(
            market_id=p.market_id,
            user_id=p.user_id,
            outcome=p.outcome.value,
            amount=p.amount,
            updated_at=p.updated_at.isoformat() if p.updated_at else None,
        )


class PositionListResponse(BaseModel):
    items: list[PositionResponse]
