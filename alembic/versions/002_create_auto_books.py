"""002: create auto_books table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE auto_books (
            id                  VARCHAR(64)     PRIMARY KEY,
            user_id             VARCHAR(64)     NOT NULL,
            event_id            VARCHAR(64)     NOT NULL REFERENCES events(id),
            quantity            SMALLINT        NOT NULL,
            seat_class          VARCHAR(16)     NOT NULL DEFAULT 'GENERAL',
            max_budget          BIGINT          NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'ACTIVE',
            failure_reason      VARCHAR(32),
            last_checked_at     TIMESTAMPTZ,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_auto_books_user_event UNIQUE (user_id, event_id),
            CONSTRAINT ck_auto_books_quantity CHECK (quantity >= 1 AND quantity <= 10),
            CONSTRAINT ck_auto_books_budget_gte_0 CHECK (max_budget >= 0),
            CONSTRAINT ck_auto_books_seat_class CHECK (
                seat_class IN ('GENERAL', 'PREMIUM', 'VIP')
            ),
            CONSTRAINT ck_auto_books_status CHECK (
                status IN ('ACTIVE', 'SUCCESS', 'FAILED')
            ),
            CONSTRAINT ck_auto_books_failure_reason CHECK (
                failure_reason IS NULL OR failure_reason IN (
                    'BUDGET_EXCEEDED', 'BOOKING_WINDOW_MISSED', 'DUPLICATE_REQUEST',
                    'SOLD_OUT_FAST', 'PLATFORM_ERROR', 'QUANTITY_UNAVAILABLE',
                    'NETWORK_TIMEOUT'
                )
            ),
            CONSTRAINT ck_auto_books_failed_has_reason CHECK (
                (status = 'FAILED') = (failure_reason IS NOT NULL)
            )
        );
    """)
    # Candidate scan in processing order
    op.execute(
        "CREATE INDEX idx_auto_books_status_order ON auto_books (status, created_at, id);"
    )
    op.execute("CREATE INDEX idx_auto_books_user ON auto_books (user_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_auto_books_updated_at
            BEFORE UPDATE ON auto_books
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS auto_books CASCADE;")
