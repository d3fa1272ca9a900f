"""Auth API router.

POST /auth/register  creates the user and opens a zero-balance ledger account
POST /auth/login     exchanges credentials for an access/refresh token pair
POST /auth/refresh   exchanges a refresh token for a new access token
"""

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_common.database import atomic, get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from src.pm_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()

_ACCESS_TTL_SECONDS = settings.JWT_EXPIRE_MINUTES * 60


def _ok(request: Request, data: BaseModel, message: str) -> ApiResponse:
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    resp.message = message
    return resp


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def register(
    request: Request,
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    # User row and ledger account commit together or not at all.
    async with atomic(db):
        user = await _service.register(body.username, body.email, body.password, db)

    data = RegisterResponse(
        user_id=user.identity,
        username=user.username,
        email=user.email,
        balance=0,
        created_at=user.created_at.isoformat(),
    )
    return _ok(request, data, "User registered")


@router.post("/login", response_model=ApiResponse)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    user, access, refresh = await _service.login(body.username, body.password, db)
    data = LoginResponse(
        access_token=access,
        refresh_token=refresh,
        expires_in=_ACCESS_TTL_SECONDS,
        user=UserInfo(user_id=user.identity, username=user.username, email=user.email),
    )
    return _ok(request, data, "Logged in")


@router.post("/refresh", response_model=ApiResponse)
async def refresh(request: Request, body: RefreshRequest) -> ApiResponse:
    access = await _service.refresh(body.refresh_token)
    data = RefreshResponse(access_token=access, expires_in=_ACCESS_TTL_SECONDS)
    return _ok(request, data, "Token refreshed")
