"""AccountRepository — host ledger: balances, ledger entries and transfers.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows on a debit means the sender could not cover the amount.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back the transaction.
"""

from dataclasses import fields
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Account, LedgerEntry
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import (
    InsufficientFundsError,
    InternalError,
    InvalidAmountError,
    NotFoundError,
)

_ACCOUNT_COLUMNS = "id, user_id, balance, version, created_at, updated_at"

# ---------------------------------------------------------------------------
# SQL: accounts mutations
# ---------------------------------------------------------------------------

_CREDIT_SQL = text(f"""
    UPDATE accounts
    SET balance = balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING {_ACCOUNT_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE accounts
    SET balance = balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND balance >= :amount
    RETURNING {_ACCOUNT_COLUMNS}
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_id, entry_type, amount, balance_after,
           reference_type, reference_id, description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = CAST(:entry_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")

_GET_ACCOUNT_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE user_id = :user_id
""")


def _row_to_account(row: Any) -> Account:
    account = Account(**{f.name: getattr(row, f.name) for f in fields(Account)})
    account.id = str(account.id)  # UUID column
    return account


def _row_to_ledger(row: Any) -> LedgerEntry:
    return LedgerEntry(**{f.name: getattr(row, f.name) for f in fields(LedgerEntry)})


class AccountRepository:
    """Concrete repository and transfer gateway — atomic at the SQL level."""

    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]:
        account = await self._credit(db, user_id, amount)
        entry = await self._write_ledger(
            db,
            account,
            LedgerEntryType.DEPOSIT,
            amount,
            reference_type="DEPOSIT",
            reference_id=None,
            description="Simulated deposit",
        )
        return account, entry

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]:
        account = await self._debit(db, user_id, amount)
        entry = await self._write_ledger(
            db,
            account,
            LedgerEntryType.WITHDRAW,
            -amount,
            reference_type="WITHDRAW",
            reference_id=None,
            description="Simulated withdrawal",
        )
        return account, entry

    async def transfer(
        self,
        db: AsyncSession,
        amount: int,
        sender: str,
        recipient: str,
        reference_type: str,
        reference_id: str,
    ) -> None:
        if amount <= 0:
            raise InvalidAmountError(f"transfer amount must be positive, got {amount}")
        debited = await self._debit(db, sender, amount)
        await self._write_ledger(
            db,
            debited,
            LedgerEntryType.TRANSFER_OUT,
            -amount,
            reference_type=reference_type,
            reference_id=reference_id,
            description=f"Transfer to {recipient}",
        )
        credited = await self._credit(db, recipient, amount)
        await self._write_ledger(
            db,
            credited,
            LedgerEntryType.TRANSFER_IN,
            amount,
            reference_type=reference_type,
            reference_id=reference_id,
            description=f"Transfer from {sender}",
        )

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "entry_type": entry_type,
                "limit": limit,
            },
        )
        rows = result.fetchall()
        return [_row_to_ledger(row) for row in rows]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _credit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise NotFoundError(f"account {user_id}")
        return _row_to_account(row)

    async def _debit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            acc_result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})
            acc_row = acc_result.fetchone()
            available = acc_row.balance if acc_row else 0
            raise InsufficientFundsError(amount, available)
        return _row_to_account(row)

    async def _write_ledger(
        self,
        db: AsyncSession,
        account: Account,
        entry_type: LedgerEntryType,
        amount: int,
        reference_type: str | None,
        reference_id: str | None,
        description: str,
    ) -> LedgerEntry:
        ledger_result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": account.user_id,
                "entry_type": entry_type.value,
                "amount": amount,
                "balance_after": account.balance,
                "reference_type": reference_type,
                "reference_id": reference_id,
                "description": description,
            },
        )
        ledger_row = ledger_result.fetchone()
        if ledger_row is None:
            raise InternalError("Ledger insert returned no rows — this should never happen")
        return _row_to_ledger(ledger_row)
