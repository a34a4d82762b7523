"""Initial migration - users, patients, doctors, appointments, notifications.

Revision ID: 001
Revises:
Create Date: 2025-08-20 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        postgresql.TIMESTAMP(timezone=True),
        server_default=sa.text("NOW()"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("user_role", sa.String(20), nullable=False),
        _created_at(),
        sa.CheckConstraint("user_role IN ('Patient', 'Provider')", name="users_role_check"),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )

    op.create_table(
        "patients",
        sa.Column("patient_id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("emergency_contact", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("patient_id"),
        sa.UniqueConstraint("user_id", name="patients_user_id_key"),
    )

    op.create_table(
        "doctors",
        sa.Column("doctor_id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("specialization", sa.String(200), nullable=True),
        sa.Column("experience_years", sa.Integer(), nullable=True),
        sa.Column("available_days", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("doctor_id"),
        sa.UniqueConstraint("user_id", name="doctors_user_id_key"),
    )

    op.create_table(
        "appointments",
        sa.Column("appointment_id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("appointment_date", postgresql.TIMESTAMP(timezone=False), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            server_default=sa.text("'Scheduled'"),
            nullable=False,
        ),
        _created_at(),
        sa.CheckConstraint(
            "status IN ('Scheduled', 'Completed', 'Cancelled')",
            name="appointments_status_check",
        ),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.patient_id"]),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.doctor_id"]),
        sa.PrimaryKeyConstraint("appointment_id"),
    )
    op.create_index(
        "idx_appointments_doctor_date", "appointments", ["doctor_id", "appointment_date"]
    )
    op.create_index("idx_appointments_patient", "appointments", ["patient_id"])

    op.create_table(
        "notifications",
        sa.Column("notification_id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("appointment_id", sa.Integer(), nullable=False),
        sa.Column(
            "notification_type",
            sa.String(20),
            server_default=sa.text("'confirmation'"),
            nullable=False,
        ),
        sa.Column("sent_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "notification_type IN ('confirmation', 'reminder')",
            name="notifications_type_check",
        ),
        sa.CheckConstraint("status IN ('Sent', 'Failed')", name="notifications_status_check"),
        sa.ForeignKeyConstraint(["appointment_id"], ["appointments.appointment_id"]),
        sa.PrimaryKeyConstraint("notification_id"),
    )
    op.create_index("idx_notifications_appointment", "notifications", ["appointment_id"])
    op.create_index(
        "idx_notifications_pending",
        "notifications",
        ["appointment_id"],
        postgresql_where=sa.text("sent_at IS NULL"),
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index("idx_notifications_pending", table_name="notifications")
    op.drop_index("idx_notifications_appointment", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_appointments_patient", table_name="appointments")
    op.drop_index("idx_appointments_doctor_date", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("doctors")
    op.drop_table("patients")
    op.drop_table("users")
