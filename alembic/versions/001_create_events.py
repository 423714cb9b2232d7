"""001: create events table and the updated_at trigger function

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE events (
            id                      VARCHAR(64)     PRIMARY KEY,
            name                    VARCHAR(255)    NOT NULL,
            category                VARCHAR(64)     NOT NULL DEFAULT 'general',
            venue                   VARCHAR(255)    NOT NULL DEFAULT '',
            city                    VARCHAR(128)    NOT NULL DEFAULT '',
            event_date              TIMESTAMPTZ,
            price                   BIGINT          NOT NULL,
            ticket_release_time     TIMESTAMPTZ     NOT NULL,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'COMING_SOON',
            is_active               BOOLEAN         NOT NULL DEFAULT TRUE,
            platform_source         VARCHAR(64)     NOT NULL DEFAULT 'manual',
            is_test_event           BOOLEAN         NOT NULL DEFAULT FALSE,
            cloned_from_id          VARCHAR(64)     REFERENCES events(id) ON DELETE SET NULL,
            original_release_time   TIMESTAMPTZ,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_events_price_gte_0 CHECK (price >= 0),
            CONSTRAINT ck_events_status CHECK (
                status IN ('COMING_SOON', 'LIVE', 'SOLD_OUT', 'EXPIRED')
            )
        );
    """)
    # Promotion scan: COMING_SOON + active + release time reached
    op.execute(
        "CREATE INDEX idx_events_promotion ON events (status, is_active, ticket_release_time);"
    )
    op.execute("""
        CREATE TRIGGER trg_events_updated_at
            BEFORE UPDATE ON events
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS events CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
