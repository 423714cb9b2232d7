"""003: seed sample events

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
    # Prices in paise
    op.execute("""
        INSERT INTO events (
            id, name, category, venue, city, event_date, price,
            ticket_release_time, status, is_active, platform_source
        ) VALUES
            ('EVT-COLDPLAY-MUM-2027',
             'Coldplay: Music of the Spheres', 'concert',
             'DY Patil Stadium', 'Mumbai', '2027-01-18T19:00:00+05:30', 450000,
             '2026-11-01T12:00:00+05:30', 'COMING_SOON', TRUE, 'bookmyshow'),
            ('EVT-IPL-FINAL-2027',
             'IPL 2027 Final', 'sports',
             'Narendra Modi Stadium', 'Ahmedabad', '2027-05-30T19:30:00+05:30', 250000,
             '2027-05-01T10:00:00+05:30', 'COMING_SOON', TRUE, 'paytm_insider'),
            ('EVT-STANDUP-BLR-2026',
             'Stand-up Night', 'comedy',
             'Chowdiah Memorial Hall', 'Bengaluru', '2026-12-05T20:00:00+05:30', 99900,
             '2026-10-01T12:00:00+05:30', 'LIVE', TRUE, 'district');
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM events
        WHERE id IN ('EVT-COLDPLAY-MUM-2027', 'EVT-IPL-FINAL-2027', 'EVT-STANDUP-BLR-2026');
    """)
