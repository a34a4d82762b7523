"""Appointment emails and the notification log."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import Select, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clinic_time import format_clinic_time
from app.core.email import EmailNotifier
from app.core.email_templates import confirmation_email, reminder_email
from app.models.appointments import appointments
from app.models.doctors import doctors
from app.models.notifications import notifications
from app.models.patients import patients
from app.models.users import users
from app.schemas.notifications import NotificationStatus, NotificationType

logger = structlog.get_logger(__name__)

patient_users = users.alias("patient_users")
doctor_users = users.alias("doctor_users")


def appointment_details_query() -> Select:
    """Select an appointment together with the patient and doctor display fields."""
    return select(
        appointments.c.appointment_id,
        appointments.c.appointment_date,
        patient_users.c.email.label("patient_email"),
        patient_users.c.full_name.label("patient_name"),
        doctor_users.c.full_name.label("doctor_name"),
    ).select_from(
        appointments.join(patients, patients.c.patient_id == appointments.c.patient_id)
        .join(patient_users, patient_users.c.user_id == patients.c.user_id)
        .join(doctors, doctors.c.doctor_id == appointments.c.doctor_id)
        .join(doctor_users, doctor_users.c.user_id == doctors.c.user_id)
    )


class NotificationService:
    """Sends appointment emails and keeps an append-only log of attempts."""

    def __init__(self, db: AsyncSession, notifier: EmailNotifier):
        """Initialize service with database session and email notifier."""
        self.db = db
        self.notifier = notifier

    async def record(
        self,
        appointment_id: int,
        outcome: NotificationStatus,
        notification_type: NotificationType,
    ) -> None:
        """
        Append one send attempt to the log.

        A sent attempt is stamped with the current UTC time; a failed attempt
        keeps ``sent_at`` NULL.

        Args:
            appointment_id: Appointment the email was about
            outcome: Sent or Failed
            notification_type: Confirmation or reminder
        """
        sent_at = datetime.now(UTC) if outcome == NotificationStatus.SENT else None
        stmt = insert(notifications).values(
            appointment_id=appointment_id,
            notification_type=notification_type.value,
            sent_at=sent_at,
            status=outcome.value,
        )

        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "notification_recorded",
            appointment_id=appointment_id,
            notification_type=notification_type.value,
            status=outcome.value,
        )

    async def get_appointment_details(self, appointment_id: int) -> Mapping[str, Any] | None:
        """Load display data for an appointment email."""
        stmt = appointment_details_query().where(appointments.c.appointment_id == appointment_id)
        result = await self.db.execute(stmt)
        row = result.fetchone()
        return row._mapping if row else None

    async def deliver(
        self,
        details: Mapping[str, Any],
        notification_type: NotificationType,
    ) -> NotificationStatus:
        """
        Send a confirmation or reminder email and record the outcome.

        Args:
            details: Row from ``appointment_details_query``
            notification_type: Which email to send

        Returns:
            Recorded outcome
        """
        when = format_clinic_time(details["appointment_date"])
        patient_name = details["patient_name"]
        doctor_name = details["doctor_name"]

        if notification_type == NotificationType.REMINDER:
            subject = "Appointment Reminder"
            html = reminder_email(patient_name, doctor_name, when)
        else:
            subject = f"Appointment Confirmed with {doctor_name or 'your doctor'}"
            html = confirmation_email(patient_name, doctor_name, when)

        to = (details["patient_email"] or "").strip()
        sent = await self.notifier.send(to, subject, html)
        outcome = NotificationStatus.SENT if sent else NotificationStatus.FAILED

        await self.record(details["appointment_id"], outcome, notification_type)
        return outcome

    async def notify_appointment(
        self,
        appointment_id: int,
        notification_type: NotificationType,
    ) -> NotificationStatus | None:
        """
        Look up an appointment and deliver one email about it.

        Returns:
            Recorded outcome, or None if the appointment could not be loaded
        """
        details = await self.get_appointment_details(appointment_id)
        if details is None:
            logger.warning(
                "notification_details_missing",
                appointment_id=appointment_id,
                notification_type=notification_type.value,
            )
            return None

        return await self.deliver(details, notification_type)
