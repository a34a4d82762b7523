"""Appointment schemas for request/response validation."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from app.core.clinic_time import normalize_time


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment as the signed-in patient."""

    model_config = {"populate_by_name": True}

    doctor_id: int = Field(..., gt=0)
    appointment_day: date = Field(..., alias="date", description="Calendar date, YYYY-MM-DD")
    appointment_time: str = Field(
        ...,
        alias="time",
        description="Clinic wall-clock time, HH:MM or HH:MM:SS",
    )

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Normalize the time to HH:MM:SS."""
        return normalize_time(v)


class AppointmentCreated(BaseModel):
    """Schema for a successful booking."""

    appointment_id: int


class AppointmentStatusUpdate(BaseModel):
    """Schema for updating appointment status."""

    status: AppointmentStatus


class MessageResponse(BaseModel):
    """Acknowledgement message."""

    message: str


class AppointmentResponse(BaseModel):
    """Schema for an appointment in the patient's own listing."""

    appointment_id: int
    patient_id: int
    doctor_id: int
    status: AppointmentStatus
    appointment_date: datetime
    display_time: str

    model_config = {"from_attributes": True}


class DoctorAppointmentResponse(BaseModel):
    """Schema for an appointment on a provider's day sheet."""

    appointment_id: int
    appointment_date: datetime
    status: AppointmentStatus
    patient_id: int
    patient_name: str | None = None

    model_config = {"from_attributes": True}
