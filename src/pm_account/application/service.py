"""AccountApplicationService — thin composition layer over the host ledger.

Deposit and withdraw run as one unit of work each (see pm_common.database.atomic).
get_balance and list_ledger are read-only and run without explicit transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.application.schemas import (
    BalanceResponse,
    DepositResponse,
    LedgerEntryItem,
    LedgerResponse,
    WithdrawResponse,
)
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.database import atomic
from src.pm_common.errors import NotFoundError
from src.pm_common.pagination import cursor_decode, cursor_encode


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        account = await self._repo.get_account_by_user_id(db, user_id)
        if account is None:
            raise NotFoundError(f"account {user_id}")
        return BalanceResponse(user_id=user_id, balance=account.balance)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> DepositResponse:
        async with atomic(db):
            account, entry = await self._repo.deposit(db, user_id, amount)
        return DepositResponse(
            balance=account.balance, deposited=amount, ledger_entry_id=entry.id
        )

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> WithdrawResponse:
        async with atomic(db):
            account, entry = await self._repo.withdraw(db, user_id, amount)
        return WithdrawResponse(
            balance=account.balance, withdrawn=amount, ledger_entry_id=entry.id
        )

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_ledger_entries(
            db, user_id, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                amount=e.amount,
                balance_after=e.balance_after,
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                description=e.description,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)
