"""Value objects returned by the payout engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FeeBreakdown:
    gross: int
    platform_fee: int
    creator_fee: int
    net: int


@dataclass(frozen=True)
class Odds:
    yes_bps: int
    no_bps: int
