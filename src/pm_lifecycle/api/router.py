"""Mutating market endpoints. Caller identity is the bearer token subject.

POST /markets                          — create
POST /markets/{market_id}/bets         — stake on YES or NO
POST /markets/{market_id}/resolve      — creator resolution
POST /markets/{market_id}/claim        — pay out the caller's winning stake
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_user_id
from src.pm_lifecycle.application.schemas import (
    BetResponse,
    ClaimResponse,
    CreateMarketRequest,
    MarketCreatedResponse,
    PlaceBetRequest,
    ResolveRequest,
    ResolveResponse,
)
from src.pm_lifecycle.application.service import MarketLifecycleService

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketLifecycleService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    market = await _service.create_market(
        db,
        creator=user_id,
        title=body.title,
        description=body.description,
        duration=body.duration,
        resolution_window=body.resolution_window,
        creator_fee_bps=body.creator_fee_bps,
    )
    resp = success_response(MarketCreatedResponse.from_domain(market).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/bets")
async def place_bet(
    market_id: int,
    body: PlaceBetRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    receipt = await _service.place_bet(db, user_id, market_id, body.outcome, body.amount)
    resp = success_response(BetResponse.from_receipt(receipt, body.amount).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/resolve")
async def resolve_market(
    market_id: int,
    body: ResolveRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    market = await _service.resolve(db, user_id, market_id, body.outcome)
    resp = success_response(ResolveResponse.from_domain(market).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/claim")
async def claim(
    market_id: int,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    receipt = await _service.claim(db, user_id, market_id)
    resp = success_response(ClaimResponse.from_receipt(receipt).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
