"""Appointments table model using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    text,
)

metadata = MetaData()

appointments = Table(
    "appointments",
    metadata,
    Column("appointment_id", Integer, primary_key=True, autoincrement=True),
    # Ownership / references
    Column("patient_id", Integer, ForeignKey("patients.patient_id"), nullable=False),
    Column("doctor_id", Integer, ForeignKey("doctors.doctor_id"), nullable=False),
    # Clinic wall-clock time exactly as booked; no zone conversion is applied
    Column("appointment_date", DateTime(timezone=False), nullable=False),
    # Status management (soft delete = 'Cancelled')
    Column("status", String(20), nullable=False, server_default="Scheduled"),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
    CheckConstraint(
        "status IN ('Scheduled', 'Completed', 'Cancelled')",
        name="appointments_status_check",
    ),
    Index("idx_appointments_doctor_date", "doctor_id", "appointment_date"),
    Index("idx_appointments_patient", "patient_id"),
)
