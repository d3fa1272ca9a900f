"""Tests for the pure payout engine."""

import pytest

from src.pm_common.enums import Outcome
from src.pm_common.errors import ArithmeticOverflowError
from src.pm_common.units import AMOUNT_MAX
from src.pm_market.domain.models import Market
from src.pm_payout.domain.models import FeeBreakdown, Odds
from src.pm_payout.domain.payout import (
    fees,
    odds,
    potential_winnings,
    redistribute,
    settle_claim,
)


def _market(yes: int = 0, no: int = 0, outcome: Outcome | None = None, fee: int = 100) -> Market:
    return Market(
        id=1,
        creator="creator-1",
        title="t",
        description="",
        end_tick=100,
        resolution_tick=150,
        creator_fee_bps=fee,
        total_pool=yes + no,
        yes_pool=yes,
        no_pool=no,
        resolved=outcome is not None,
        outcome=outcome,
    )


class TestRedistribute:
    def test_pro_rata_share_of_losing_pool(self) -> None:
        assert redistribute(1000, 1000, 500) == 1500

    def test_share_is_floored(self) -> None:
        # 100 * 100 / 300 = 33.33
        assert redistribute(100, 300, 100) == 133

    def test_empty_losing_pool_returns_stake(self) -> None:
        assert redistribute(700, 700, 0) == 700

    def test_zero_bet_earns_nothing(self) -> None:
        assert redistribute(0, 500, 500) == 0

    def test_wide_intermediate_does_not_overflow(self) -> None:
        assert redistribute(AMOUNT_MAX // 2, AMOUNT_MAX // 2, AMOUNT_MAX // 2) == (
            AMOUNT_MAX // 2 * 2
        )

    def test_zero_winning_pool_with_stake_is_a_defect(self) -> None:
        with pytest.raises(ArithmeticOverflowError):
            redistribute(10, 0, 10)


class TestFees:
    def test_scenario_a(self) -> None:
        assert fees(1500, 250, 100) == FeeBreakdown(
            gross=1500, platform_fee=37, creator_fee=15, net=1448
        )

    def test_zero_rates(self) -> None:
        assert fees(999, 0, 0).net == 999

    @pytest.mark.parametrize("gross", [1, 9, 10_000, 123_457, AMOUNT_MAX])
    def test_net_at_least_eighty_percent_at_max_rates(self, gross: int) -> None:
        b = fees(gross, 1000, 1000)
        assert b.net * 10 >= gross * 8
        assert b.net + b.platform_fee + b.creator_fee == gross


class TestOdds:
    def test_empty_market_is_even(self) -> None:
        assert odds(0, 0) == Odds(5000, 5000)

    def test_300_700(self) -> None:
        assert odds(300, 700) == Odds(3000, 7000)

    def test_floored_independently(self) -> None:
        o = odds(1, 2)
        assert (o.yes_bps, o.no_bps) == (3333, 6666)
        assert o.yes_bps + o.no_bps == 9999

    def test_one_sided(self) -> None:
        assert odds(0, 5) == Odds(0, 10_000)


class TestPotentialWinnings:
    def test_includes_hypothetical_stake_in_own_pool(self) -> None:
        # redistribute(100, 300 + 100, 200) = 100 + 100*200/400
        assert potential_winnings(_market(yes=300, no=200), Outcome.YES, 100) == 150

    def test_opposite_side(self) -> None:
        assert potential_winnings(_market(yes=300, no=200), Outcome.NO, 100) == 200

    def test_empty_market(self) -> None:
        assert potential_winnings(_market(), Outcome.NO, 50) == 50


class TestSettleClaim:
    def test_uses_winning_side_pools_and_creator_fee(self) -> None:
        b = settle_claim(_market(yes=1000, no=500, outcome=Outcome.YES), 1000, 250)
        assert (b.gross, b.platform_fee, b.creator_fee, b.net) == (1500, 37, 15, 1448)

    def test_no_side_wins(self) -> None:
        b = settle_claim(_market(yes=1000, no=500, outcome=Outcome.NO, fee=0), 500, 0)
        assert b.gross == 1500

    def test_unresolved_market_rejected(self) -> None:
        with pytest.raises(ValueError):
            settle_claim(_market(yes=1, no=1), 1, 0)
