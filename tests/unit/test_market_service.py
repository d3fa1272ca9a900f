"""Unit tests for the read-side MarketApplicationService."""

import pytest

from src.pm_common.enums import Outcome
from src.pm_common.errors import InvalidAmountError, InvalidOutcomeError, NotFoundError
from src.pm_common.pagination import cursor_decode
from src.pm_common.units import AMOUNT_MAX
from src.pm_market.application.service import MarketApplicationService
from src.pm_market.domain.models import NewMarket


@pytest.fixture
async def setup(env):
    for i in range(3):
        await env.markets.create(
            env.db, NewMarket(f"creator-{i}", f"Market {i}", "", 100, 150, 100)
        )
    svc = MarketApplicationService(repo=env.markets, platform=env.platform, clock=env.clock)
    return env, svc


class TestGetMarket:
    async def test_detail_with_derived_state(self, setup) -> None:
        env, svc = setup
        env.clock.tick = 100
        detail = await svc.get_market(env.db, 2)
        assert detail.id == 2
        assert detail.state == "CLOSED"
        assert detail.current_tick == 100
        assert detail.outcome is None

    async def test_not_found(self, setup) -> None:
        env, svc = setup
        with pytest.raises(NotFoundError):
            await svc.get_market(env.db, 99)


class TestListMarkets:
    async def test_newest_first_with_cursor(self, setup) -> None:
        env, svc = setup
        first = await svc.list_markets(env.db, None, 2)
        assert [m.id for m in first.items] == [3, 2]
        assert first.has_more is True
        assert cursor_decode(first.next_cursor) == 2

        second = await svc.list_markets(env.db, first.next_cursor, 2)
        assert [m.id for m in second.items] == [1]
        assert second.has_more is False
        assert second.next_cursor is None

    async def test_garbage_cursor_starts_from_top(self, setup) -> None:
        env, svc = setup
        page = await svc.list_markets(env.db, "not-base64!!", 10)
        assert [m.id for m in page.items] == [3, 2, 1]


class TestCountAndOdds:
    async def test_total_markets(self, setup) -> None:
        env, svc = setup
        assert (await svc.get_total_markets(env.db)).total_markets == 3

    async def test_odds_of_empty_market(self, setup) -> None:
        env, svc = setup
        o = await svc.get_market_odds(env.db, 1)
        assert (o.yes_bps, o.no_bps) == (5000, 5000)

    async def test_odds_follow_pools(self, setup) -> None:
        env, svc = setup
        m = env.markets.rows[1]
        m.add_stake(Outcome.YES, 300)
        m.add_stake(Outcome.NO, 700)
        o = await svc.get_market_odds(env.db, 1)
        assert (o.yes_bps, o.no_bps) == (3000, 7000)


class TestPotentialWinnings:
    async def test_reports_gross_and_fee_estimate(self, setup) -> None:
        env, svc = setup
        m = env.markets.rows[1]
        m.add_stake(Outcome.NO, 500)
        result = await svc.get_potential_winnings(env.db, 1, "yes", 1000)
        assert result.gross == 1500
        assert (result.platform_fee, result.creator_fee, result.net) == (37, 15, 1448)
        assert result.platform_fee_bps == 250

    async def test_is_a_pure_read(self, setup) -> None:
        env, svc = setup
        await svc.get_potential_winnings(env.db, 1, "NO", 10)
        assert env.markets.rows[1].total_pool == 0

    async def test_bad_outcome(self, setup) -> None:
        env, svc = setup
        with pytest.raises(InvalidOutcomeError):
            await svc.get_potential_winnings(env.db, 1, "maybe", 10)

    async def test_negative_amount(self, setup) -> None:
        env, svc = setup
        with pytest.raises(InvalidAmountError):
            await svc.get_potential_winnings(env.db, 1, "NO", -5)

    @pytest.mark.parametrize("side", [Outcome.YES, Outcome.NO])
    async def test_amount_that_would_overflow_the_pool(self, setup, side) -> None:
        env, svc = setup
        env.markets.rows[1].add_stake(side, 1)
        with pytest.raises(InvalidAmountError):
            await svc.get_potential_winnings(env.db, 1, "YES", AMOUNT_MAX)

    async def test_amount_filling_an_empty_market_exactly(self, setup) -> None:
        env, svc = setup
        result = await svc.get_potential_winnings(env.db, 1, "YES", AMOUNT_MAX)
        assert result.gross == AMOUNT_MAX
