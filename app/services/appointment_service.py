"""Appointment service for business logic."""

from datetime import date, datetime, timedelta

import structlog
from sqlalchemy import and_, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import StatusUpdatePolicy, settings
from app.core.clinic_time import clinic_now, format_clinic_time
from app.core.email import EmailNotifier
from app.core.email_templates import cancellation_email
from app.core.exceptions import (
    ForbiddenException,
    InternalServerException,
    NotFoundException,
)
from app.core.roles import may_change_status
from app.models.appointments import appointments
from app.models.notifications import notifications
from app.models.patients import patients
from app.models.users import users
from app.schemas.appointments import (
    AppointmentCreate,
    AppointmentCreated,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    DoctorAppointmentResponse,
    MessageResponse,
)
from app.schemas.auth import AuthContext
from app.services.identity_service import IdentityService
from app.services.notification_service import NotificationService
from app.services.scheduling_service import SchedulingService

logger = structlog.get_logger(__name__)


class AppointmentService:
    """Service for managing appointments."""

    def __init__(
        self,
        db: AsyncSession,
        notifier: EmailNotifier | None = None,
        policy: StatusUpdatePolicy | None = None,
    ):
        """
        Initialize service with database session, email notifier and status policy.

        Read-only callers may omit the notifier; booking and cancellation need it.
        """
        self.db = db
        self.notifier = notifier
        self.policy = policy or settings.status_update_policy

    async def create_appointment(
        self,
        auth: AuthContext,
        data: AppointmentCreate,
    ) -> AppointmentCreated:
        """
        Book a new appointment for the signed-in patient.

        Args:
            auth: Authenticated patient
            data: Appointment creation data

        Returns:
            Identifier of the created appointment
        """
        scheduler = SchedulingService(self.db, self.notifier)
        appointment_id = await scheduler.schedule(auth, data)
        return AppointmentCreated(appointment_id=appointment_id)

    async def update_status(
        self,
        auth: AuthContext,
        appointment_id: int,
        data: AppointmentStatusUpdate,
    ) -> MessageResponse:
        """
        Update appointment status.

        Args:
            auth: Authenticated caller
            appointment_id: Appointment ID
            data: New status

        Returns:
            Acknowledgement

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the status policy rejects the caller
        """
        if data.status == AppointmentStatus.CANCELLED:
            # Cancelling always purges pending notifications in the same transaction
            return await self.cancel_appointment(auth, appointment_id)

        await self._check_status_policy(auth, appointment_id)

        stmt = (
            update(appointments)
            .where(appointments.c.appointment_id == appointment_id)
            .values(status=data.status.value)
            .returning(appointments.c.appointment_id)
        )

        try:
            result = await self.db.execute(stmt)
            row = result.fetchone()
            if row is not None:
                await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("appointment_update_failed", appointment_id=appointment_id, error=str(e))
            raise InternalServerException("Failed to update appointment") from e

        if row is None:
            await self.db.rollback()
            raise NotFoundException("Appointment not found")

        logger.info("appointment_status_updated", appointment_id=appointment_id, status=data.status.value)
        return MessageResponse(message="Appointment updated")

    async def cancel_appointment(
        self,
        auth: AuthContext,
        appointment_id: int,
    ) -> MessageResponse:
        """
        Cancel an appointment (soft delete) and purge its unsent notifications.

        The status flip and the purge commit together. The cancellation email
        goes out only after the commit and never fails the request.

        Args:
            auth: Authenticated caller
            appointment_id: Appointment ID

        Returns:
            Acknowledgement

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the status policy rejects the caller
            InternalServerException: If the transaction fails
        """
        await self._check_status_policy(auth, appointment_id)

        cancel_stmt = (
            update(appointments)
            .where(
                and_(
                    appointments.c.appointment_id == appointment_id,
                    appointments.c.status != AppointmentStatus.CANCELLED.value,
                )
            )
            .values(status=AppointmentStatus.CANCELLED.value)
            .returning(appointments.c.appointment_id)
        )
        purge_stmt = delete(notifications).where(
            and_(
                notifications.c.appointment_id == appointment_id,
                notifications.c.sent_at.is_(None),
            )
        )

        try:
            result = await self.db.execute(cancel_stmt)
            newly_cancelled = result.fetchone() is not None

            found = newly_cancelled
            if not newly_cancelled:
                existing = await self.db.execute(
                    select(appointments.c.appointment_id).where(
                        appointments.c.appointment_id == appointment_id
                    )
                )
                found = existing.fetchone() is not None

            if found:
                await self.db.execute(purge_stmt)
                await self.db.commit()
            else:
                await self.db.rollback()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("appointment_cancel_failed", appointment_id=appointment_id, error=str(e))
            raise InternalServerException("Failed to cancel appointment") from e

        if not found:
            raise NotFoundException("Appointment not found")

        if not newly_cancelled:
            logger.info("appointment_already_cancelled", appointment_id=appointment_id)
            return MessageResponse(message="Appointment already cancelled")

        logger.info("appointment_cancelled", appointment_id=appointment_id)
        await self._send_cancellation(appointment_id)
        return MessageResponse(message="Appointment cancelled")

    async def list_my_appointments(self, auth: AuthContext) -> list[AppointmentResponse]:
        """
        List the signed-in patient's appointments, newest first.

        Raises:
            NotFoundException: If the user has no patient profile
        """
        patient_id = await IdentityService.get_patient_id(self.db, auth.user_id)
        if patient_id is None:
            raise NotFoundException("Patient not found")

        stmt = (
            select(
                appointments.c.appointment_id,
                appointments.c.patient_id,
                appointments.c.doctor_id,
                appointments.c.status,
                appointments.c.appointment_date,
            )
            .where(appointments.c.patient_id == patient_id)
            .order_by(appointments.c.appointment_date.desc())
        )
        result = await self.db.execute(stmt)

        return [
            AppointmentResponse(
                **row._mapping,
                display_time=format_clinic_time(row.appointment_date),
            )
            for row in result.fetchall()
        ]

    async def get_booked_slots(self, doctor_id: int, on_date: date) -> list[datetime]:
        """
        Get the upcoming, non-cancelled appointment times of a doctor on a date.

        Args:
            doctor_id: Doctor ID
            on_date: Calendar date in clinic time

        Returns:
            Appointment timestamps, earliest first
        """
        day_start = datetime(on_date.year, on_date.month, on_date.day)
        now = clinic_now().replace(tzinfo=None)

        stmt = (
            select(appointments.c.appointment_date)
            .where(
                and_(
                    appointments.c.doctor_id == doctor_id,
                    appointments.c.appointment_date >= day_start,
                    appointments.c.appointment_date < day_start + timedelta(days=1),
                    appointments.c.appointment_date > now,
                    appointments.c.status != AppointmentStatus.CANCELLED.value,
                )
            )
            .order_by(appointments.c.appointment_date)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_doctor_appointments(
        self,
        auth: AuthContext,
        on_date: date,
    ) -> list[DoctorAppointmentResponse]:
        """
        List the signed-in provider's non-cancelled appointments on a date.

        Raises:
            ForbiddenException: If the user has no doctor profile
        """
        doctor_id = await IdentityService.get_doctor_id(self.db, auth.user_id)
        if doctor_id is None:
            raise ForbiddenException("Not a valid doctor")

        day_start = datetime(on_date.year, on_date.month, on_date.day)
        stmt = (
            select(
                appointments.c.appointment_id,
                appointments.c.appointment_date,
                appointments.c.status,
                patients.c.patient_id,
                users.c.full_name.label("patient_name"),
            )
            .select_from(
                appointments.join(patients, patients.c.patient_id == appointments.c.patient_id).join(
                    users, users.c.user_id == patients.c.user_id
                )
            )
            .where(
                and_(
                    appointments.c.doctor_id == doctor_id,
                    appointments.c.appointment_date >= day_start,
                    appointments.c.appointment_date < day_start + timedelta(days=1),
                    appointments.c.status != AppointmentStatus.CANCELLED.value,
                )
            )
            .order_by(appointments.c.appointment_date.asc())
        )
        result = await self.db.execute(stmt)
        return [DoctorAppointmentResponse.model_validate(dict(row._mapping)) for row in result.fetchall()]

    async def _check_status_policy(self, auth: AuthContext, appointment_id: int) -> None:
        """Apply the configured status update policy before any write."""
        if self.policy == StatusUpdatePolicy.AUTHENTICATED:
            return

        result = await self.db.execute(
            select(appointments.c.patient_id, appointments.c.doctor_id).where(
                appointments.c.appointment_id == appointment_id
            )
        )
        row = result.fetchone()
        if row is None:
            raise NotFoundException("Appointment not found")

        caller_identity_id = await IdentityService.resolve(self.db, auth)
        if not may_change_status(
            self.policy,
            auth.role,
            caller_identity_id,
            row.patient_id,
            row.doctor_id,
        ):
            raise ForbiddenException("Access denied to this appointment")

    async def _send_cancellation(self, appointment_id: int) -> None:
        """Email the cancellation notice; the cancellation is already committed."""
        if self.notifier is None:
            return

        try:
            details = await NotificationService(self.db, self.notifier).get_appointment_details(
                appointment_id
            )
            if details is None:
                return

            when = format_clinic_time(details["appointment_date"])
            await self.notifier.send(
                details["patient_email"],
                f"Appointment with {details['doctor_name']} cancelled",
                cancellation_email(details["patient_name"], details["doctor_name"], when),
            )
        except Exception as e:
            # Log error but don't fail the request
            logger.warning("cancellation_email_failed", appointment_id=appointment_id, error=str(e))
