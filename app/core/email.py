"""Transactional email via Resend."""

import asyncio

import resend
import structlog

logger = structlog.get_logger(__name__)


class EmailNotifier:
    """
    Sends HTML email through Resend.

    Built once at startup and shared. ``send`` never raises: every failure is
    logged and reported as ``False`` so callers can record a failed attempt.
    """

    def __init__(self, api_key: str, sender: str):
        """Initialize notifier with the Resend API key and sender address."""
        self.sender = sender
        self.enabled = bool(api_key)
        if self.enabled:
            resend.api_key = api_key

    async def send(self, to: str, subject: str, html: str) -> bool:
        """
        Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body

        Returns:
            True if Resend accepted the message
        """
        if not self.enabled:
            logger.warning("email_not_configured", to=to, subject=subject)
            return False

        if not to:
            logger.warning("email_missing_recipient", subject=subject)
            return False

        params = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }

        try:
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            logger.error("email_send_failed", to=to, subject=subject, error=str(e))
            return False

        logger.info("email_sent", to=to, subject=subject, message_id=response.get("id"))
        return True
