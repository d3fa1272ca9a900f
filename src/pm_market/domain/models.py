"""Domain models for pm_market — pure dataclasses, pool bookkeeping only."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import Outcome
from src.pm_common.units import checked_add


@dataclass
class Market:
    id: int
    creator: str
    title: str
    description: str
    end_tick: int
    resolution_tick: int
    creator_fee_bps: int
    total_pool: int = 0
    yes_pool: int = 0
    no_pool: int = 0
    resolved: bool = False
    outcome: Outcome | None = None
    created_at: datetime | None = None

    def pool_for(self, outcome: Outcome) -> int:
        return self.yes_pool if outcome is Outcome.YES else self.no_pool

    def add_stake(self, outcome: Outcome, amount: int) -> None:
        """Credit one side and the total together so total == yes + no holds."""
        if outcome is Outcome.YES:
            self.yes_pool = checked_add(self.yes_pool, amount)
        else:
            self.no_pool = checked_add(self.no_pool, amount)
        self.total_pool = checked_add(self.yes_pool, self.no_pool)


@dataclass
class NewMarket:
    """Validated creation input; ticks already computed by the lifecycle layer."""

    creator: str
    title: str
    description: str
    end_tick: int
    resolution_tick: int
    creator_fee_bps: int
