"""Day-ahead appointment reminders."""

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from sqlalchemy import and_, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.clinic_time import tomorrow_bounds
from app.core.email import EmailNotifier
from app.models.appointments import appointments
from app.models.notifications import notifications
from app.schemas.appointments import AppointmentStatus
from app.schemas.notifications import NotificationStatus, NotificationType, ReminderSummary
from app.services.notification_service import NotificationService, appointment_details_query

logger = structlog.get_logger(__name__)


class ReminderService:
    """Finds tomorrow's scheduled appointments and emails a reminder for each."""

    def __init__(
        self,
        db: AsyncSession,
        notifier: EmailNotifier,
        dedupe_hours: int | None = None,
    ):
        """Initialize service with database session, email notifier and dedupe window."""
        self.db = db
        self.notifications = NotificationService(db, notifier)
        self.dedupe_window = timedelta(hours=dedupe_hours or settings.reminder_dedupe_hours)

    async def find_due(self, now: datetime | None = None) -> list[Mapping[str, Any]]:
        """
        Select appointments that need a reminder.

        An appointment is due when it is still Scheduled, falls on tomorrow in
        clinic time, and has no Sent reminder inside the dedupe window.

        Args:
            now: Sweep time (aware); defaults to the current time

        Returns:
            Rows from ``appointment_details_query``
        """
        now = now or datetime.now(UTC)
        start, end = tomorrow_bounds(now)

        already_reminded = exists().where(
            and_(
                notifications.c.appointment_id == appointments.c.appointment_id,
                notifications.c.notification_type == NotificationType.REMINDER.value,
                notifications.c.status == NotificationStatus.SENT.value,
                notifications.c.sent_at >= now - self.dedupe_window,
            )
        )

        stmt = (
            appointment_details_query()
            .where(
                and_(
                    appointments.c.status == AppointmentStatus.SCHEDULED.value,
                    appointments.c.appointment_date >= start,
                    appointments.c.appointment_date < end,
                    ~already_reminded,
                )
            )
            .order_by(appointments.c.appointment_date)
        )
        result = await self.db.execute(stmt)
        return [row._mapping for row in result.fetchall()]

    async def run(self, now: datetime | None = None) -> ReminderSummary:
        """
        Run one reminder sweep.

        Each appointment is handled on its own; a failure is logged and the
        sweep moves on to the next one.

        Returns:
            Counts of selected, sent and failed reminders
        """
        due = await self.find_due(now)
        summary = ReminderSummary(selected=len(due))
        logger.info("reminder_sweep_started", selected=summary.selected)

        for details in due:
            appointment_id = details["appointment_id"]
            try:
                outcome = await self.notifications.deliver(details, NotificationType.REMINDER)
            except Exception as e:
                summary.failed += 1
                logger.error("reminder_failed", appointment_id=appointment_id, error=str(e))
                continue

            if outcome == NotificationStatus.SENT:
                summary.sent += 1
            else:
                summary.failed += 1

        logger.info(
            "reminder_sweep_finished",
            selected=summary.selected,
            sent=summary.sent,
            failed=summary.failed,
        )
        return summary
