"""Add schedule_appointment function

Revision ID: 002
Revises: 001
Create Date: 2025-08-22 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
from app.models.procedures import (
    DROP_SCHEDULE_APPOINTMENT_FUNCTION,
    SCHEDULE_APPOINTMENT_FUNCTION,
)

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the booking function with its guard rules (SQLSTATE 50001-50006)."""
    op.execute(SCHEDULE_APPOINTMENT_FUNCTION)


def downgrade() -> None:
    """Drop the booking function."""
    op.execute(DROP_SCHEDULE_APPOINTMENT_FUNCTION)
