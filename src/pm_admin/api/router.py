# src/pm_admin/api/router.py
"""Admin REST API — owner-only operations."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.application.service import AdminService
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_common.units import AMOUNT_MAX
from src.pm_gateway.auth.dependencies import get_current_user_id
from src.pm_lifecycle.application.schemas import ResolveRequest, ResolveResponse
from src.pm_lifecycle.application.service import MarketLifecycleService

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()
_lifecycle = MarketLifecycleService()


class PlatformFeeRequest(BaseModel):
    rate_bps: int = Field(..., le=AMOUNT_MAX)


@router.post("/markets/{market_id}/emergency-resolve")
async def emergency_resolve(
    market_id: int,
    body: ResolveRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    market = await _lifecycle.emergency_resolve(db, user_id, market_id, body.outcome)
    resp = success_response(ResolveResponse.from_domain(market).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.put("/platform-fee")
async def set_platform_fee(
    body: PlatformFeeRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    rate = await _service.set_platform_fee_rate(db, user_id, body.rate_bps)
    resp = success_response({"platform_fee_bps": rate})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/platform-fee")
async def get_platform_fee(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    rate = await _service.get_platform_fee_rate(db)
    resp = success_response({"platform_fee_bps": rate})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_all_invariants(db, user_id)
    resp = success_response(result)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
