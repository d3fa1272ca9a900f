"""Repository Protocols — dependency inversion for testability.

Unit tests inject a mock or fake that conforms to these Protocols.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Account, LedgerEntry


class AccountRepositoryProtocol(Protocol):
    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None: ...

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]: ...

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]: ...

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...


class TransferGatewayProtocol(Protocol):
    """The host ledger's all-or-nothing value move.

    Runs inside the caller's transaction; raises InsufficientFundsError when
    the sender cannot cover the amount, leaving nothing applied.
    """

    async def transfer(
        self,
        db: AsyncSession,
        amount: int,
        sender: str,
        recipient: str,
        reference_type: str,
        reference_id: str,
    ) -> None: ...
