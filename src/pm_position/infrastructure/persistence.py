"""PositionRepository — concrete implementation of PositionRepositoryProtocol.

One row per (market_id, user_id, outcome). Rows only grow until the claim
deletes them; there is no decrement path.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Outcome
from src.pm_common.errors import InternalError
from src.pm_common.units import checked_add
from src.pm_position.domain.models import Position

_POSITION_COLUMNS = "market_id, user_id, outcome, amount, created_at, updated_at"

_GET_POSITION_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id AND user_id = :user_id AND outcome = :outcome
""")

_UPSERT_POSITION_SQL = text(f"""
    INSERT INTO positions (market_id, user_id, outcome, amount)
    VALUES (:market_id, :user_id, :outcome, :amount)
    ON CONFLICT (market_id, user_id, outcome) DO UPDATE
        SET amount = EXCLUDED.amount,
            updated_at = NOW()
    RETURNING {_POSITION_COLUMNS}
""")

_DELETE_POSITION_SQL = text("""
    DELETE FROM positions
    WHERE market_id = :market_id AND user_id = :user_id AND outcome = :outcome
    RETURNING amount
""")

_LIST_FOR_USER_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE user_id = :user_id
    ORDER BY market_id DESC, outcome
""")

_SUM_BY_OUTCOME_SQL = text("""
    SELECT outcome, COALESCE(SUM(amount), 0) AS total
    FROM positions
    WHERE market_id = :market_id
    GROUP BY outcome
""")


def _row_to_position(row: object) -> Position:
    return Position(
        market_id=row.market_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        outcome=Outcome(row.outcome),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class PositionRepository:
    """Concrete repository. Callers hold the market row lock while writing."""

    async def record_bet(
        self,
        db: AsyncSession,
        market_id: int,
        user_id: str,
        outcome: Outcome,
        amount: int,
    ) -> Position:
        existing = await self.get_position(db, market_id, user_id, outcome)
        new_amount = checked_add(existing.amount if existing else 0, amount)
        result = await db.execute(
            _UPSERT_POSITION_SQL,
            {
                "market_id": market_id,
                "user_id": user_id,
                "outcome": outcome.value,
                "amount": new_amount,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Position upsert returned no rows — this should never happen")
        return _row_to_position(row)

    async def get_position(
        self, db: AsyncSession, market_id: int, user_id: str, outcome: Outcome
    ) -> Position | None:
        result = await db.execute(
            _GET_POSITION_SQL,
            {"market_id": market_id, "user_id": user_id, "outcome": outcome.value},
        )
        row = result.fetchone()
        return _row_to_position(row) if row else None

    async def remove_position(
        self, db: AsyncSession, market_id: int, user_id: str, outcome: Outcome
    ) -> int | None:
        """Delete the row and return the stake it held, or None if there was none."""
        result = await db.execute(
            _DELETE_POSITION_SQL,
            {"market_id": market_id, "user_id": user_id, "outcome": outcome.value},
        )
        row = result.fetchone()
        return row.amount if row else None

    async def list_positions_for_user(
        self, db: AsyncSession, user_id: str
    ) -> list[Position]:
        result = await db.execute(_LIST_FOR_USER_SQL, {"user_id": user_id})
        return [_row_to_position(row) for row in result.fetchall()]

    async def sum_by_outcome(
        self, db: AsyncSession, market_id: int
    ) -> dict[Outcome, int]:
        result = await db.execute(_SUM_BY_OUTCOME_SQL, {"market_id": market_id})
        totals = {Outcome.YES: 0, Outcome.NO: 0}
        for row in result.fetchall():
            totals[Outcome(row.outcome)] = int(row.total)
        return totals
