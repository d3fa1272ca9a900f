"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Transaction ownership: the CALLER opens and commits the unit of work.
Mutating paths read through get_market_for_update so the row stays locked
until commit, which serialises every call touching the same market.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Outcome
from src.pm_common.errors import InternalError, MarketResolvedError
from src.pm_market.domain.models import Market, NewMarket

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_MARKET_COLUMNS = """
    id, creator, title, description,
    end_tick, resolution_tick, creator_fee_bps,
    total_pool, yes_pool, no_pool,
    resolved, outcome, created_at
"""

# The counter row is updated in place, so a rolled-back create never burns an id.
_NEXT_ID_SQL = text("""
    UPDATE market_sequence
    SET next_id = next_id + 1
    WHERE id = 1
    RETURNING next_id - 1 AS market_id
""")

_COUNT_SQL = text("SELECT next_id - 1 FROM market_sequence WHERE id = 1")

_INSERT_MARKET_SQL = text(f"""
    INSERT INTO markets
        (id, creator, title, description,
         end_tick, resolution_tick, creator_fee_bps)
    VALUES
        (:id, :creator, :title, :description,
         :end_tick, :resolution_tick, :creator_fee_bps)
    RETURNING {_MARKET_COLUMNS}
""")

_GET_MARKET_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id")

_GET_MARKET_FOR_UPDATE_SQL = text(
    f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id FOR UPDATE"
)

_LIST_MARKETS_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT)
    ORDER BY id DESC
    LIMIT :limit
""")

_UPDATE_POOLS_SQL = text("""
    UPDATE markets
    SET total_pool = :total_pool,
        yes_pool = :yes_pool,
        no_pool = :no_pool,
        updated_at = NOW()
    WHERE id = :id
""")

_RESOLVE_SQL = text("""
    UPDATE markets
    SET resolved = TRUE,
        outcome = :outcome,
        resolved_at = NOW(),
        updated_at = NOW()
    WHERE id = :id AND resolved = FALSE
    RETURNING id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_market(row: object) -> Market:
    outcome = row.outcome  # type: ignore[attr-defined]
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        creator=row.creator,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        end_tick=row.end_tick,  # type: ignore[attr-defined]
        resolution_tick=row.resolution_tick,  # type: ignore[attr-defined]
        creator_fee_bps=row.creator_fee_bps,  # type: ignore[attr-defined]
        total_pool=row.total_pool,  # type: ignore[attr-defined]
        yes_pool=row.yes_pool,  # type: ignore[attr-defined]
        no_pool=row.no_pool,  # type: ignore[attr-defined]
        resolved=row.resolved,  # type: ignore[attr-defined]
        outcome=Outcome(outcome) if outcome is not None else None,
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Concrete repository — market rows plus the id sequence."""

    async def create(self, db: AsyncSession, new: NewMarket) -> Market:
        seq_row = (await db.execute(_NEXT_ID_SQL)).fetchone()
        if seq_row is None:
            raise InternalError("market_sequence row missing — run migrations")
        result = await db.execute(
            _INSERT_MARKET_SQL,
            {
                "id": seq_row.market_id,
                "creator": new.creator,
                "title": new.title,
                "description": new.description,
                "end_tick": new.end_tick,
                "resolution_tick": new.resolution_tick,
                "creator_fee_bps": new.creator_fee_bps,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Market insert returned no rows — this should never happen")
        return _row_to_market(row)

    async def get_market_by_id(
        self, db: AsyncSession, market_id: int
    ) -> Market | None:
        result = await db.execute(_GET_MARKET_SQL, {"market_id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def get_market_for_update(
        self, db: AsyncSession, market_id: int
    ) -> Market | None:
        result = await db.execute(_GET_MARKET_FOR_UPDATE_SQL, {"market_id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def count_markets(self, db: AsyncSession) -> int:
        result = await db.execute(_COUNT_SQL)
        count = result.scalar_one_or_none()
        return int(count) if count is not None else 0

    async def list_markets(
        self, db: AsyncSession, cursor_id: int | None, limit: int
    ) -> list[Market]:
        result = await db.execute(
            _LIST_MARKETS_SQL, {"cursor_id": cursor_id, "limit": limit}
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def update_pools(self, db: AsyncSession, market: Market) -> None:
        await db.execute(
            _UPDATE_POOLS_SQL,
            {
                "id": market.id,
                "total_pool": market.total_pool,
                "yes_pool": market.yes_pool,
                "no_pool": market.no_pool,
            },
        )

    async def mark_resolved(
        self, db: AsyncSession, market_id: int, outcome: Outcome
    ) -> None:
        result = await db.execute(
            _RESOLVE_SQL, {"id": market_id, "outcome": outcome.value}
        )
        if result.fetchone() is None:
            raise MarketResolvedError(market_id)
