"""Domain models for pm_position — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import Outcome


@dataclass
class Position:
    market_id: int
    user_id: str
    outcome: Outcome
    amount: int               # accumulated stake, always > 0 while the row exists
    created_at: datetime | None = None
    updated_at: datetime | None = None
