"""004: create positions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE positions (
            market_id       BIGINT          NOT NULL REFERENCES markets (id),
            user_id         VARCHAR(64)     NOT NULL,
            outcome         VARCHAR(3)      NOT NULL,
            amount          BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (market_id, user_id, outcome),
            CONSTRAINT ck_positions_outcome CHECK (outcome IN ('YES', 'NO')),
            CONSTRAINT ck_positions_amount_gt_0 CHECK (amount > 0)
        );
    """)
    op.execute("CREATE INDEX idx_positions_user ON positions (user_id);")
    op.execute("""
        CREATE TRIGGER trg_positions_updated_at
            BEFORE UPDATE ON positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE positions IS 'Stake per (market, user, outcome); deleted on claim';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
