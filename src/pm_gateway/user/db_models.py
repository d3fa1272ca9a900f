"""SQLAlchemy ORM model for the users table (migration 002).

The primary key is a UUID, but everywhere else in the ledger (market creator,
position holder, account owner, JWT subject) a user is the string form of
that UUID. `identity` and `parse_identity` are the only two conversions.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.pm_common.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")
    )
    username: Mapped[str] = mapped_column(String(64), unique=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("NOW()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=text("NOW()")
    )

    @property
    def identity(self) -> str:
        """Caller identity as stored on markets, positions and accounts."""
        return str(self.id)

    @staticmethod
    def parse_identity(identity: str | None) -> uuid.UUID | None:
        """Primary key for an identity string; None if it is not a UUID."""
        try:
            return uuid.UUID(identity or "")
        except ValueError:
            return None
