"""Daily reminder job on APScheduler."""

import pytz
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.email import EmailNotifier
from app.schemas.notifications import ReminderSummary
from app.services.reminder_service import ReminderService

logger = structlog.get_logger(__name__)


class ReminderScheduler:
    """Runs the reminder sweep once a day at a fixed clinic-local time."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: EmailNotifier,
        hour: int = 9,
        minute: int = 0,
        timezone_name: str = "Asia/Kolkata",
        enabled: bool = True,
    ):
        """
        Initialize scheduler.

        Args:
            session_factory: Factory for the sweep's own database sessions
            notifier: Email notifier shared with request handling
            hour: Local hour of the daily run
            minute: Local minute of the daily run
            timezone_name: Clinic time zone
            enabled: Whether the job is scheduled at all
        """
        self.session_factory = session_factory
        self.notifier = notifier
        self.hour = hour
        self.minute = minute
        self.tz = pytz.timezone(timezone_name)
        self.enabled = enabled

        self._scheduler: AsyncIOScheduler | None = None

    @property
    def is_running(self) -> bool:
        """Whether the scheduler has been started."""
        return self._scheduler is not None

    async def start(self) -> None:
        """Start the scheduler."""
        if not self.enabled:
            logger.info("reminder_scheduler_disabled")
            return

        if self._scheduler is not None:
            logger.warning("reminder_scheduler_already_running")
            return

        scheduler = AsyncIOScheduler(timezone=self.tz)
        scheduler.add_job(
            self._run_job,
            CronTrigger(hour=self.hour, minute=self.minute, timezone=self.tz),
            id="appointment_reminders",
            replace_existing=True,
            name="Day-ahead Appointment Reminders",
            coalesce=True,
            max_instances=1,
        )
        scheduler.start()
        self._scheduler = scheduler

        logger.info(
            "reminder_scheduler_started",
            timezone=str(self.tz),
            hour=self.hour,
            minute=self.minute,
        )

    async def stop(self) -> None:
        """Stop the scheduler."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("reminder_scheduler_stopped")

    async def run_once(self) -> ReminderSummary:
        """Run one sweep in a fresh session."""
        async with self.session_factory() as session:
            return await ReminderService(session, self.notifier).run()

    async def _run_job(self) -> None:
        try:
            await self.run_once()
        except Exception as e:
            logger.error("reminder_job_failed", error=str(e), exc_info=True)
