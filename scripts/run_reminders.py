#!/usr/bin/env python3
"""
Run the day-ahead reminder sweep once, outside the daily schedule.

Usage:
    python scripts/run_reminders.py
    python scripts/run_reminders.py --dry-run

Environment Variables:
    DATABASE_URL, RESEND_API_KEY, EMAIL_FROM, CLINIC_TIMEZONE (see app/config.py)
"""

import argparse
import asyncio
import sys

import dotenv

dotenv.load_dotenv()

from app.config import settings  # noqa: E402
from app.core.clinic_time import format_clinic_time  # noqa: E402
from app.core.email import EmailNotifier  # noqa: E402
from app.database import AsyncSessionLocal, engine  # noqa: E402
from app.middleware.logging import configure_logging  # noqa: E402
from app.services.reminder_service import ReminderService  # noqa: E402


async def run(dry_run: bool) -> int:
    """Run one sweep and print a summary."""
    notifier = EmailNotifier(api_key=settings.resend_api_key, sender=settings.email_from)

    try:
        async with AsyncSessionLocal() as session:
            service = ReminderService(session, notifier)

            if dry_run:
                due = await service.find_due()
                for row in due:
                    print(
                        f"#{row['appointment_id']}  {format_clinic_time(row['appointment_date'])}"
                        f"  {row['patient_email']}  ({row['doctor_name']})"
                    )
                print(f"{len(due)} appointment(s) due for a reminder")
                return 0

            summary = await service.run()
    finally:
        await engine.dispose()

    print(f"selected={summary.selected} sent={summary.sent} failed={summary.failed}")
    return 0 if summary.failed == 0 else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Send tomorrow's appointment reminders now")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the appointments that would be reminded without sending anything",
    )
    args = parser.parse_args()

    configure_logging()
    sys.exit(asyncio.run(run(args.dry_run)))


if __name__ == "__main__":
    main()
