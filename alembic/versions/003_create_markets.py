"""003: create markets and market_sequence tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE market_sequence (
            id          SMALLINT    PRIMARY KEY,
            next_id     BIGINT      NOT NULL,
            CONSTRAINT ck_market_sequence_single_row CHECK (id = 1),
            CONSTRAINT ck_market_sequence_next_id_gte_1 CHECK (next_id >= 1)
        );
    """)
    op.execute("INSERT INTO market_sequence (id, next_id) VALUES (1, 1);")

    op.execute("""
        CREATE TABLE markets (
            id                  BIGINT          PRIMARY KEY,
            creator             VARCHAR(64)     NOT NULL,
            title               VARCHAR(256)    NOT NULL,
            description         TEXT            NOT NULL DEFAULT '',
            end_tick            BIGINT          NOT NULL,
            resolution_tick     BIGINT          NOT NULL,
            creator_fee_bps     SMALLINT        NOT NULL,
            total_pool          BIGINT          NOT NULL DEFAULT 0,
            yes_pool            BIGINT          NOT NULL DEFAULT 0,
            no_pool             BIGINT          NOT NULL DEFAULT 0,
            resolved            BOOLEAN         NOT NULL DEFAULT FALSE,
            outcome             VARCHAR(3),
            resolved_at         TIMESTAMPTZ,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_title_len CHECK (LENGTH(title) BETWEEN 1 AND 256),
            CONSTRAINT ck_markets_description_len CHECK (LENGTH(description) <= 1024),
            CONSTRAINT ck_markets_ticks CHECK (end_tick >= 0 AND resolution_tick >= end_tick),
            CONSTRAINT ck_markets_creator_fee CHECK (creator_fee_bps BETWEEN 0 AND 1000),
            CONSTRAINT ck_markets_pools_gte_0 CHECK (yes_pool >= 0 AND no_pool >= 0),
            CONSTRAINT ck_markets_total_pool CHECK (total_pool = yes_pool + no_pool),
            CONSTRAINT ck_markets_outcome CHECK (outcome IN ('YES', 'NO')),
            CONSTRAINT ck_markets_resolved_outcome CHECK (
                (resolved AND outcome IS NOT NULL) OR (NOT resolved AND outcome IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_markets_creator ON markets (creator);")
    op.execute("CREATE INDEX idx_markets_unresolved ON markets (id) WHERE resolved = FALSE;")
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_markets_outcome_final()
        RETURNS TRIGGER AS $$
        BEGIN
            IF OLD.resolved AND (NOT NEW.resolved OR NEW.outcome IS DISTINCT FROM OLD.outcome) THEN
                RAISE EXCEPTION 'market % is resolved; outcome is final', OLD.id;
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER trg_markets_outcome_final
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_markets_outcome_final();
    """)
    op.execute("COMMENT ON TABLE markets IS 'Pari-mutuel YES/NO markets; pools in integer units';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_markets_outcome_final();")
    op.execute("DROP TABLE IF EXISTS market_sequence CASCADE;")
