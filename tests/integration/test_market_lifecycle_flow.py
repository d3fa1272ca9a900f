# tests/integration/test_market_lifecycle_flow.py
"""End-to-end pari-mutuel flow over HTTP against a real database.

The lifecycle service's clock is swapped for a manual one so the test can
move past end_tick without sleeping.
"""

import pytest

from src.pm_lifecycle.api.router import _service as lifecycle_service

pytestmark = pytest.mark.asyncio(loop_scope="session")


class _ManualClock:
    def __init__(self, tick: int) -> None:
        self.tick = tick

    def now(self) -> int:
        return self.tick


@pytest.fixture
def clock(monkeypatch):
    c = _ManualClock(1_000)
    monkeypatch.setattr(lifecycle_service, "_clock", c)
    return c


async def _balance(client, headers) -> int:
    resp = await client.get("/api/v1/account/balance", headers=headers)
    return resp.json()["data"]["balance"]


class TestScenarioA:
    async def test_bet_resolve_claim(self, client, register_user, clock):
        _, creator = await register_user("creator")
        _, x = await register_user("x")
        _, y = await register_user("y")
        for headers in (x, y):
            await client.post("/api/v1/account/deposit", json={"amount": 10_000}, headers=headers)

        created = await client.post(
            "/api/v1/markets",
            json={"title": "Scenario A", "duration": 100, "resolution_window": 50,
                  "creator_fee_bps": 100},
            headers=creator,
        )
        assert created.status_code == 201
        market_id = created.json()["data"]["market_id"]

        bet = await client.post(
            f"/api/v1/markets/{market_id}/bets", json={"outcome": "YES", "amount": 1000},
            headers=x,
        )
        assert bet.status_code == 200
        await client.post(
            f"/api/v1/markets/{market_id}/bets", json={"outcome": "NO", "amount": 500},
            headers=y,
        )

        odds = await client.get(f"/api/v1/markets/{market_id}/odds", headers=x)
        assert odds.json()["data"]["yes_bps"] == 6666

        clock.tick += 100
        late = await client.post(
            f"/api/v1/markets/{market_id}/bets", json={"outcome": "NO", "amount": 1}, headers=y
        )
        assert late.json()["reason"] == "MarketClosed"

        resolved = await client.post(
            f"/api/v1/markets/{market_id}/resolve", json={"outcome": "YES"}, headers=creator
        )
        assert resolved.status_code == 200

        fee = await client.get("/api/v1/admin/platform-fee", headers=x)
        platform_bps = fee.json()["data"]["platform_fee_bps"]

        claim = await client.post(f"/api/v1/markets/{market_id}/claim", headers=x)
        data = claim.json()["data"]
        assert data["gross"] == 1500
        assert data["creator_fee"] == 15
        assert data["platform_fee"] == 1500 * platform_bps // 10_000
        assert await _balance(client, x) == 9000 + data["net_winnings"]
        assert await _balance(client, creator) == 15

        again = await client.post(f"/api/v1/markets/{market_id}/claim", headers=x)
        assert again.json()["reason"] == "NotFound"
