"""Appointment endpoints."""

from datetime import date, datetime

from fastapi import APIRouter, Query, status

from app.dependencies import (
    CurrentAuth,
    DatabaseSession,
    Notifier,
    PatientAuth,
    PortalAuth,
    ProviderAuth,
)
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentCreated,
    AppointmentResponse,
    AppointmentStatusUpdate,
    DoctorAppointmentResponse,
    MessageResponse,
)
from app.services.appointment_service import AppointmentService

router = APIRouter()


@router.post(
    "/my",
    response_model=AppointmentCreated,
    status_code=status.HTTP_201_CREATED,
    tags=["Appointments"],
    summary="Book an appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    auth: PatientAuth,
    db: DatabaseSession,
    notifier: Notifier,
) -> AppointmentCreated:
    """
    Book an appointment for the signed-in patient.

    Args:
        data: Doctor, date and wall-clock time
        auth: Authenticated patient
        db: Database session
        notifier: Email notifier

    Returns:
        Identifier of the created appointment
    """
    service = AppointmentService(db, notifier)
    return await service.create_appointment(auth, data)


@router.get(
    "/my",
    response_model=list[AppointmentResponse],
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="List my appointments",
)
async def list_my_appointments(
    auth: PatientAuth,
    db: DatabaseSession,
) -> list[AppointmentResponse]:
    """List the signed-in patient's appointments, newest first."""
    service = AppointmentService(db)
    return await service.list_my_appointments(auth)


@router.get(
    "/doctor/appointments",
    response_model=list[DoctorAppointmentResponse],
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="List a provider's appointments for a day",
)
async def list_doctor_appointments(
    auth: ProviderAuth,
    db: DatabaseSession,
    on_date: date = Query(..., alias="date"),
) -> list[DoctorAppointmentResponse]:
    """
    List the signed-in provider's non-cancelled appointments on a date.

    Args:
        auth: Authenticated provider
        db: Database session
        on_date: Calendar date (YYYY-MM-DD)

    Returns:
        Appointments with patient names, earliest first
    """
    service = AppointmentService(db)
    return await service.list_doctor_appointments(auth, on_date)


@router.get(
    "/doctor/{doctor_id}/booked",
    response_model=list[datetime],
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Get a doctor's booked slots",
)
async def get_booked_slots(
    doctor_id: int,
    auth: CurrentAuth,
    db: DatabaseSession,
    on_date: date = Query(..., alias="date"),
) -> list[datetime]:
    """Get the upcoming, non-cancelled appointment times of a doctor on a date."""
    service = AppointmentService(db)
    return await service.get_booked_slots(doctor_id, on_date)


@router.put(
    "/{appointment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Update appointment status",
)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    auth: PortalAuth,
    db: DatabaseSession,
    notifier: Notifier,
) -> MessageResponse:
    """
    Update appointment status (Scheduled, Completed or Cancelled).

    Args:
        appointment_id: Appointment ID
        data: Status update data
        auth: Authenticated caller
        db: Database session
        notifier: Email notifier

    Returns:
        Acknowledgement

    Raises:
        HTTPException: If appointment not found or access denied
    """
    service = AppointmentService(db, notifier)
    return await service.update_status(auth, appointment_id, data)


@router.delete(
    "/{appointment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Cancel appointment",
)
async def cancel_appointment(
    appointment_id: int,
    auth: PortalAuth,
    db: DatabaseSession,
    notifier: Notifier,
) -> MessageResponse:
    """
    Cancel an appointment (soft delete) and drop its unsent notifications.

    Args:
        appointment_id: Appointment ID
        auth: Authenticated caller
        db: Database session
        notifier: Email notifier

    Returns:
        Acknowledgement

    Raises:
        HTTPException: If appointment not found or access denied
    """
    service = AppointmentService(db, notifier)
    return await service.cancel_appointment(auth, appointment_id)
