"""Notification log for appointment emails."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP

metadata = MetaData()

# One row per send attempt. sent_at IS NULL marks an attempt that never went out.
notifications = Table(
    "notifications",
    metadata,
    Column("notification_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "appointment_id",
        Integer,
        ForeignKey("appointments.appointment_id"),
        nullable=False,
    ),
    Column("notification_type", String(20), nullable=False, server_default="confirmation"),
    Column("sent_at", TIMESTAMP(timezone=True), nullable=True),
    Column("status", String(20), nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")),
    CheckConstraint(
        "notification_type IN ('confirmation', 'reminder')",
        name="notifications_type_check",
    ),
    CheckConstraint("status IN ('Sent', 'Failed')", name="notifications_status_check"),
    Index("idx_notifications_appointment", "appointment_id"),
    Index(
        "idx_notifications_pending",
        "appointment_id",
        postgresql_where=text("sent_at IS NULL"),
    ),
)
