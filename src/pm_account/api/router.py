"""Host ledger REST API. Every route acts on the authenticated caller's account.

Market stakes and payouts never go through these routes; they move value with
the in-process transfer primitive instead.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.application.schemas import DepositRequest, WithdrawRequest
from src.pm_account.application.service import AccountApplicationService
from src.pm_common.database import get_db_session
from src.pm_common.enums import LedgerEntryType
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/account", tags=["account"])
_service = AccountApplicationService()

CallerId = Annotated[str, Depends(get_current_user_id)]
Session = Annotated[AsyncSession, Depends(get_db_session)]


def _ok(request: Request, data: BaseModel) -> ApiResponse:
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/balance")
async def get_balance(request: Request, user_id: CallerId, db: Session) -> ApiResponse:
    return _ok(request, await _service.get_balance(db, user_id))


@router.post("/deposit")
async def deposit(
    request: Request, body: DepositRequest, user_id: CallerId, db: Session
) -> ApiResponse:
    return _ok(request, await _service.deposit(db, user_id, body.amount))


@router.post("/withdraw")
async def withdraw(
    request: Request, body: WithdrawRequest, user_id: CallerId, db: Session
) -> ApiResponse:
    return _ok(request, await _service.withdraw(db, user_id, body.amount))


@router.get("/ledger")
async def list_ledger(
    request: Request,
    user_id: CallerId,
    db: Session,
    cursor: str | None = Query(None, description="Opaque cursor from the previous page"),
    limit: int = Query(20, ge=1, le=100),
    entry_type: LedgerEntryType | None = Query(None),
) -> ApiResponse:
    kind = entry_type.value if entry_type is not None else None
    return _ok(request, await _service.list_ledger(db, user_id, cursor, limit, kind))
