"""Unit tests for AccountApplicationService using a mock repository."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from src.pm_account.application.service import AccountApplicationService
from src.pm_account.domain.models import Account, LedgerEntry
from src.pm_common.errors import NotFoundError
from src.pm_common.pagination import cursor_decode, cursor_encode


def _make_account(balance: int = 100_000) -> Account:
    return Account(
        id="uuid-1",
        user_id="user-1",
        balance=balance,
        version=1,
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
    )


def _make_ledger_entry(entry_id: int = 1, amount: int = 10_000) -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        user_id="user-1",
        entry_type="DEPOSIT",
        amount=amount,
        balance_after=110_000,
        created_at=datetime.now(UTC),
    )


class TestGetBalance:
    async def test_returns_balance(self) -> None:
        repo = AsyncMock()
        repo.get_account_by_user_id.return_value = _make_account(150_000)
        result = await AccountApplicationService(repo=repo).get_balance(AsyncMock(), "user-1")
        assert result.balance == 150_000

    async def test_missing_account(self) -> None:
        repo = AsyncMock()
        repo.get_account_by_user_id.return_value = None
        with pytest.raises(NotFoundError):
            await AccountApplicationService(repo=repo).get_balance(AsyncMock(), "user-1")


class TestDepositWithdraw:
    async def test_deposit_commits(self) -> None:
        repo = AsyncMock()
        repo.deposit.return_value = (_make_account(110_000), _make_ledger_entry(7))
        db = AsyncMock()

        result = await AccountApplicationService(repo=repo).deposit(db, "user-1", 10_000)

        assert (result.balance, result.deposited, result.ledger_entry_id) == (110_000, 10_000, 7)
        db.commit.assert_awaited_once()

    async def test_failed_withdraw_rolls_back(self) -> None:
        repo = AsyncMock()
        repo.withdraw.side_effect = NotFoundError("account user-1")
        db = AsyncMock()

        with pytest.raises(NotFoundError):
            await AccountApplicationService(repo=repo).withdraw(db, "user-1", 5)

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()


class TestListLedger:
    async def test_has_more_and_cursor(self) -> None:
        repo = AsyncMock()
        repo.list_ledger_entries.return_value = [_make_ledger_entry(i) for i in (5, 4, 3)]

        result = await AccountApplicationService(repo=repo).list_ledger(
            AsyncMock(), "user-1", cursor_encode(6), 2, None
        )

        assert [e.id for e in result.items] == [5, 4]
        assert result.has_more is True
        assert cursor_decode(result.next_cursor) == 4
        assert repo.list_ledger_entries.await_args.args[2:] == (6, 3, None)
