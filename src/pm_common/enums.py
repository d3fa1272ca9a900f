"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum

from src.pm_common.errors import InvalidOutcomeError


class Outcome(str, Enum):
    YES = "YES"
    NO = "NO"

    def opposite(self) -> "Outcome":
        return Outcome.NO if self is Outcome.YES else Outcome.YES

    @classmethod
    def parse(cls, value: object) -> "Outcome":
        """Accept an Outcome, a bool (True = YES) or a case-insensitive 'YES'/'NO'."""
        if isinstance(value, Outcome):
            return value
        if isinstance(value, bool):
            return cls.YES if value else cls.NO
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidOutcomeError(value)


class MarketState(str, Enum):
    """Derived from end_tick and resolved; never stored."""
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    RESOLVED = "RESOLVED"


class LedgerEntryType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    TRANSFER_OUT = "TRANSFER_OUT"
    TRANSFER_IN = "TRANSFER_IN"


class TransferReference(str, Enum):
    """reference_type written on both ledger entries of a transfer."""
    BET = "BET"
    CLAIM_PAYOUT = "CLAIM_PAYOUT"
    CREATOR_FEE = "CREATOR_FEE"
