"""In-memory fakes of the repository protocols, plus a session that can roll back.

FakeSession snapshots every store on commit and restores the snapshot on
rollback, so tests observe the same all-or-nothing behaviour the real
PostgreSQL transaction gives.
"""

import copy
import dataclasses
from types import SimpleNamespace

import pytest

from src.pm_common.enums import Outcome
from src.pm_common.errors import (
    InsufficientFundsError,
    InvalidAmountError,
    MarketResolvedError,
)
from src.pm_common.units import checked_add, checked_sub
from src.pm_lifecycle.application.service import MarketLifecycleService
from src.pm_market.domain.models import Market, NewMarket
from src.pm_position.domain.models import Position

CUSTODY = "MARKET_CUSTODY"


class ManualClock:
    def __init__(self, tick: int = 0) -> None:
        self.tick = tick

    def now(self) -> int:
        return self.tick

    def advance(self, ticks: int) -> None:
        self.tick += ticks


class FakeMarketRepo:
    def __init__(self) -> None:
        self.rows: dict[int, Market] = {}
        self.next_id = 1

    async def create(self, db, new: NewMarket) -> Market:
        market = Market(id=self.next_id, **dataclasses.asdict(new))
        self.next_id += 1
        self.rows[market.id] = market
        return dataclasses.replace(market)

    async def get_market_by_id(self, db, market_id: int) -> Market | None:
        m = self.rows.get(market_id)
        return dataclasses.replace(m) if m else None

    async def get_market_for_update(self, db, market_id: int) -> Market | None:
        return await self.get_market_by_id(db, market_id)

    async def count_markets(self, db) -> int:
        return self.next_id - 1

    async def list_markets(self, db, cursor_id: int | None, limit: int) -> list[Market]:
        ids = sorted((i for i in self.rows if cursor_id is None or i < cursor_id), reverse=True)
        return [dataclasses.replace(self.rows[i]) for i in ids[:limit]]

    async def update_pools(self, db, market: Market) -> None:
        row = self.rows[market.id]
        row.yes_pool, row.no_pool, row.total_pool = (
            market.yes_pool,
            market.no_pool,
            market.total_pool,
        )

    async def mark_resolved(self, db, market_id: int, outcome: Outcome) -> None:
        row = self.rows[market_id]
        if row.resolved:
            raise MarketResolvedError(market_id)
        row.resolved = True
        row.outcome = outcome


class FakePositionRepo:
    def __init__(self) -> None:
        self.rows: dict[tuple[int, str, Outcome], int] = {}

    async def record_bet(self, db, market_id, user_id, outcome, amount) -> Position:
        key = (market_id, user_id, outcome)
        self.rows[key] = checked_add(self.rows.get(key, 0), amount)
        return Position(market_id, user_id, outcome, self.rows[key])

    async def get_position(self, db, market_id, user_id, outcome) -> Position | None:
        amount = self.rows.get((market_id, user_id, outcome))
        return Position(market_id, user_id, outcome, amount) if amount is not None else None

    async def remove_position(self, db, market_id, user_id, outcome) -> int | None:
        return self.rows.pop((market_id, user_id, outcome), None)

    async def list_positions_for_user(self, db, user_id) -> list[Position]:
        return [Position(m, u, o, a) for (m, u, o), a in self.rows.items() if u == user_id]

    async def sum_by_outcome(self, db, market_id) -> dict[Outcome, int]:
        totals = {Outcome.YES: 0, Outcome.NO: 0}
        for (m, _, o), a in self.rows.items():
            if m == market_id:
                totals[o] += a
        return totals


class FakeLedger:
    """Host-ledger transfer gateway over a dict of balances."""

    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self.balances: dict[str, int] = {CUSTODY: 0, **(balances or {})}
        self.transfers: list[tuple[int, str, str, str, str]] = []

    async def transfer(self, db, amount, sender, recipient, reference_type, reference_id):
        if amount <= 0:
            raise InvalidAmountError(str(amount))
        available = self.balances.get(sender, 0)
        if available < amount:
            raise InsufficientFundsError(amount, available)
        self.balances[sender] = checked_sub(available, amount)
        self.balances[recipient] = checked_add(self.balances.get(recipient, 0), amount)
        self.transfers.append((amount, sender, recipient, reference_type, reference_id))


class FakePlatform:
    def __init__(self, rate_bps: int = 250) -> None:
        self.rate_bps = rate_bps

    async def get_platform_fee_bps(self, db) -> int:
        return self.rate_bps

    async def set_platform_fee_bps(self, db, rate_bps: int) -> None:
        self.rate_bps = rate_bps


class FakeSession:
    """Stands in for AsyncSession: commit keeps, rollback restores."""

    def __init__(self, *stores: object) -> None:
        self._stores = stores
        self.commits = 0
        self.rollbacks = 0
        self._snapshot = self._take()

    def _take(self) -> list[dict]:
        return [copy.deepcopy(s.__dict__) for s in self._stores]

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = self._take()

    async def rollback(self) -> None:
        self.rollbacks += 1
        for store, state in zip(self._stores, self._snapshot):
            store.__dict__.clear()
            store.__dict__.update(copy.deepcopy(state))


@pytest.fixture
def env() -> SimpleNamespace:
    """A lifecycle service wired to fakes. Users X and Y hold 10_000 each."""
    markets = FakeMarketRepo()
    positions = FakePositionRepo()
    ledger = FakeLedger({"creator-1": 0, "user-x": 10_000, "user-y": 10_000})
    platform = FakePlatform(250)
    clock = ManualClock(0)
    service = MarketLifecycleService(
        markets=markets,
        positions=positions,
        platform=platform,
        transfers=ledger,
        clock=clock,
        owner_id="owner-1",
    )
    db = FakeSession(markets, positions, ledger, platform)
    return SimpleNamespace(
        markets=markets,
        positions=positions,
        ledger=ledger,
        platform=platform,
        clock=clock,
        service=service,
        db=db,
    )
