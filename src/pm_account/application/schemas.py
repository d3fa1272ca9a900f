"""Pydantic schemas for pm_account API.

Pagination cursors come from pm_common.pagination.
"""

from pydantic import BaseModel, Field

from src.pm_common.units import AMOUNT_MAX

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    amount: int = Field(..., gt=0, le=AMOUNT_MAX, description="Units to deposit")


class WithdrawRequest(BaseModel):
    amount: int = Field(..., gt=0, le=AMOUNT_MAX, description="Units to withdraw")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    balance: int


class DepositResponse(BaseModel):
    balance: int
    deposited: int
    ledger_entry_id: int


class WithdrawResponse(BaseModel):
    balance: int
    withdrawn: int
    ledger_entry_id: int


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount: int
    balance_after: int
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str  # ISO8601 string


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
