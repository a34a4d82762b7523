"""HTML bodies for appointment emails."""

from html import escape


def _greeting(patient_name: str | None) -> str:
    return f"<p>Hi {escape(patient_name or 'there')},</p>"


def confirmation_email(patient_name: str | None, doctor_name: str | None, when: str) -> str:
    """Booking confirmation."""
    return (
        f"{_greeting(patient_name)}"
        f"<p>Your appointment with <b>{escape(doctor_name or 'our provider')}</b> "
        f"is confirmed for <b>{escape(when)}</b>.</p>"
        "<p>Thanks!</p>"
    )


def cancellation_email(patient_name: str | None, doctor_name: str | None, when: str) -> str:
    """Cancellation notice."""
    return (
        f"{_greeting(patient_name)}"
        f"<p>Your appointment with <b>{escape(doctor_name or 'our provider')}</b> "
        f"on <b>{escape(when)}</b> has been cancelled.</p>"
        "<p>Thanks!</p>"
    )


def reminder_email(patient_name: str | None, doctor_name: str | None, when: str) -> str:
    """Day-ahead reminder."""
    return (
        f"{_greeting(patient_name)}"
        "<p>This is a reminder about your appointment with "
        f"<b>{escape(doctor_name or 'your doctor')}</b> tomorrow at <b>{escape(when)}</b>.</p>"
        "<p>Smart Health Portal</p>"
    )
