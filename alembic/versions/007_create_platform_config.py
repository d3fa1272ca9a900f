"""007: create platform_config and seed system rows

Revision ID: 007
Revises: 006
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

from config.settings import settings

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE platform_config (
            id                  SMALLINT    PRIMARY KEY,
            platform_fee_bps    INTEGER     NOT NULL,
            updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_platform_config_single_row CHECK (id = 1),
            CONSTRAINT ck_platform_fee_bps CHECK (platform_fee_bps BETWEEN 0 AND 1000)
        );
    """)
    op.execute(
        sa.text("INSERT INTO platform_config (id, platform_fee_bps) VALUES (1, :bps)")
        .bindparams(bps=settings.DEFAULT_PLATFORM_FEE_BPS)
    )

    # Custody account: every bet is transferred here, every payout leaves from here
    op.execute("""
        INSERT INTO accounts (user_id, balance, version)
        VALUES ('MARKET_CUSTODY', 0, 0);
    """)


def downgrade() -> None:
    op.execute("DELETE FROM accounts WHERE user_id = 'MARKET_CUSTODY';")
    op.execute("DROP TABLE IF EXISTS platform_config CASCADE;")
