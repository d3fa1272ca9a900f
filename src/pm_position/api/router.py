"""pm_position REST endpoints.

GET /positions                                   — the caller's open positions
GET /positions/{market_id}/{user_id}/{outcome}   — one stake record
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_user_id
from src.pm_position.application.service import PositionApplicationService

router = APIRouter(prefix="/positions", tags=["positions"])

_service = PositionApplicationService()


@router.get("")
async def list_my_positions(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_positions(db, user_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{market_id}/{holder_id}/{outcome}")
async def get_position(
    market_id: int,
    holder_id: str,
    outcome: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_position(db, market_id, holder_id, outcome)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
