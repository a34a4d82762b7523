"""Appointment booking through the schedule_appointment database function."""

import structlog
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clinic_time import normalize_time
from app.core.email import EmailNotifier
from app.core.exceptions import (
    AppException,
    BadRequestException,
    InternalServerException,
    NotFoundException,
    ProcedureError,
)
from app.database import to_procedure_error
from app.schemas.appointments import AppointmentCreate
from app.schemas.auth import AuthContext
from app.schemas.notifications import NotificationType
from app.services.identity_service import IdentityService
from app.services.notification_service import NotificationService

logger = structlog.get_logger(__name__)

# Business-rule rejections raised by schedule_appointment (slot taken, past date, ...)
GUARD_ERROR_CODES = frozenset({50001, 50002, 50003, 50004, 50005, 50006})
FOREIGN_KEY_VIOLATION = 23503

SCHEDULE_APPOINTMENT = text(
    "SELECT schedule_appointment("
    ":patient_id, :doctor_id, CAST(:appointment_date AS DATE), "
    "CAST(:appointment_time AS VARCHAR)) AS appointment_id"
)


def classify_procedure_error(error: ProcedureError) -> AppException:
    """
    Map a database error from the booking call to a client or server error.

    Guard rejections and FK violations become 400 with the server message;
    anything else is an internal error.
    """
    if error.code in GUARD_ERROR_CODES or error.code == FOREIGN_KEY_VIOLATION:
        return BadRequestException(error.message)
    return InternalServerException("Failed to book appointment")


class SchedulingService:
    """Books appointments for the signed-in patient."""

    def __init__(self, db: AsyncSession, notifier: EmailNotifier):
        """Initialize service with database session and email notifier."""
        self.db = db
        self.notifier = notifier

    async def schedule(self, auth: AuthContext, data: AppointmentCreate) -> int:
        """
        Book an appointment.

        Args:
            auth: Authenticated patient
            data: Doctor, date and wall-clock time

        Returns:
            New appointment_id

        Raises:
            NotFoundException: If the user has no patient profile
            BadRequestException: If the booking violates a guard rule or references an unknown doctor
            InternalServerException: If the database call fails otherwise
        """
        patient_id = await IdentityService.get_patient_id(self.db, auth.user_id)
        if patient_id is None:
            raise NotFoundException("Patient record not found")

        params = {
            "patient_id": patient_id,
            "doctor_id": data.doctor_id,
            "appointment_date": data.appointment_day,
            "appointment_time": normalize_time(data.appointment_time),
        }

        try:
            result = await self.db.execute(SCHEDULE_APPOINTMENT, params)
            appointment_id = result.scalar_one_or_none()
            if appointment_id is not None:
                await self.db.commit()
        except DBAPIError as e:
            await self.db.rollback()
            error = to_procedure_error(e)
            mapped = classify_procedure_error(error)
            log = logger.warning if mapped.status_code < 500 else logger.error
            log(
                "schedule_appointment_rejected",
                patient_id=patient_id,
                doctor_id=data.doctor_id,
                code=error.code,
                error=error.message,
            )
            raise mapped from e

        if appointment_id is None:
            await self.db.rollback()
            logger.error("schedule_appointment_no_id", patient_id=patient_id, doctor_id=data.doctor_id)
            raise InternalServerException("Scheduling procedure did not return appointment_id")

        logger.info(
            "appointment_scheduled",
            appointment_id=appointment_id,
            patient_id=patient_id,
            doctor_id=data.doctor_id,
        )

        await self._send_confirmation(appointment_id)
        return appointment_id

    async def _send_confirmation(self, appointment_id: int) -> None:
        """Email the booking confirmation; the booking is already committed."""
        try:
            await NotificationService(self.db, self.notifier).notify_appointment(
                appointment_id,
                NotificationType.CONFIRMATION,
            )
        except Exception as e:
            # Log error but don't fail the request
            logger.warning(
                "confirmation_logging_failed",
                appointment_id=appointment_id,
                error=str(e),
            )
