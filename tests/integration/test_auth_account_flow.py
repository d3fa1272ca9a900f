"""Registration, login and host-ledger account endpoints against PostgreSQL."""

import uuid

import pytest

pytestmark = pytest.mark.asyncio(loop_scope="session")


def _creds() -> dict[str, str]:
    uid = uuid.uuid4().hex[:8]
    return {"username": f"acct_{uid}", "email": f"acct_{uid}@example.com", "password": "TestPass1"}


class TestAuth:
    async def test_duplicate_username_is_already_exists(self, client) -> None:
        creds = _creds()
        await client.post("/api/v1/auth/register", json=creds)
        resp = await client.post(
            "/api/v1/auth/register", json={**creds, "email": f"x{creds['email']}"}
        )
        assert resp.status_code == 409
        assert resp.json()["reason"] == "AlreadyExists"

    async def test_wrong_password(self, client) -> None:
        creds = _creds()
        await client.post("/api/v1/auth/register", json=creds)
        resp = await client.post(
            "/api/v1/auth/login", json={"username": creds["username"], "password": "WrongPass1"}
        )
        assert resp.status_code == 401
        assert resp.json()["reason"] == "InvalidCredentials"


class TestAccount:
    async def test_new_user_starts_at_zero_and_can_deposit(self, client, register_user) -> None:
        _, headers = await register_user("acct")
        balance = await client.get("/api/v1/account/balance", headers=headers)
        assert balance.json()["data"]["balance"] == 0

        dep = await client.post("/api/v1/account/deposit", json={"amount": 700}, headers=headers)
        assert dep.json()["data"]["balance"] == 700

        short = await client.post("/api/v1/account/withdraw", json={"amount": 701}, headers=headers)
        assert short.json()["reason"] == "InsufficientFunds"

        ledger = await client.get("/api/v1/account/ledger", headers=headers)
        assert [e["entry_type"] for e in ledger.json()["data"]["items"]] == ["DEPOSIT"]
