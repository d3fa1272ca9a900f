"""User domain service: register, login, refresh.

All DB operations use the injected AsyncSession. register runs inside the
router's unit of work so the user row and its host-ledger account are
created together.
"""

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.errors import (
    AccountDisabledError,
    AlreadyExistsError,
    InvalidCredentialsError,
)
from src.pm_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.pm_gateway.auth.password import hash_password, verify_password
from src.pm_gateway.user.db_models import UserModel

_CREATE_ACCOUNT_SQL = text(
    "INSERT INTO accounts (user_id, balance, version) VALUES (:user_id, 0, 0)"
)


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> UserModel:
        """Register a new user and open their zero-balance account."""
        # DB UNIQUE constraints are the final guard; these give a clean error.
        result = await db.execute(select(UserModel).where(UserModel.username == username))
        if result.scalar_one_or_none() is not None:
            raise AlreadyExistsError(f"username {username}")

        result = await db.execute(select(UserModel).where(UserModel.email == email))
        if result.scalar_one_or_none() is not None:
            raise AlreadyExistsError(f"email {email}")

        user = UserModel(
            username=username,
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(user)
        await db.flush()  # Get user.id without committing
        await db.refresh(user)  # Load server defaults (created_at)

        await db.execute(_CREATE_ACCOUNT_SQL, {"user_id": user.identity})
        return user

    async def login(
        self,
        username: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown user and wrong password raise the same error so usernames
        cannot be enumerated.
        """
        result = await db.execute(select(UserModel).where(UserModel.username == username))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return user, create_access_token(user.identity), create_refresh_token(user.identity)

    async def refresh(self, refresh_token: str) -> str:
        """Validate a refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))
