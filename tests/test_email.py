"""Tests for the Resend email notifier."""

from unittest.mock import patch

import pytest

from app.core.email import EmailNotifier
from app.core.email_templates import confirmation_email


@pytest.mark.asyncio
async def test_send_without_api_key_reports_failure() -> None:
    """No API key means every send is reported as failed, without calling Resend."""
    notifier = EmailNotifier(api_key="", sender="clinic@example.com")

    with patch("app.core.email.resend.Emails.send") as send:
        assert await notifier.send("asha@example.com", "Hi", "<p>Hi</p>") is False

    send.assert_not_called()


@pytest.mark.asyncio
async def test_send_without_recipient() -> None:
    notifier = EmailNotifier(api_key="re_test", sender="clinic@example.com")

    with patch("app.core.email.resend.Emails.send") as send:
        assert await notifier.send("", "Hi", "<p>Hi</p>") is False

    send.assert_not_called()


@pytest.mark.asyncio
async def test_send_success() -> None:
    notifier = EmailNotifier(api_key="re_test", sender="clinic@example.com")

    with patch("app.core.email.resend.Emails.send", return_value={"id": "msg_1"}) as send:
        assert await notifier.send("asha@example.com", "Confirmed", "<p>ok</p>") is True

    send.assert_called_once_with(
        {
            "from": "clinic@example.com",
            "to": ["asha@example.com"],
            "subject": "Confirmed",
            "html": "<p>ok</p>",
        }
    )


@pytest.mark.asyncio
async def test_send_error_is_reported_not_raised() -> None:
    """Provider errors are logged and turned into False."""
    notifier = EmailNotifier(api_key="re_test", sender="clinic@example.com")

    with patch("app.core.email.resend.Emails.send", side_effect=RuntimeError("rate limited")):
        assert await notifier.send("asha@example.com", "Confirmed", "<p>ok</p>") is False


def test_templates_escape_names() -> None:
    html = confirmation_email("<script>", "Dr. O'Neil", "2 Sep 2025, 12:00 PM IST")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Dr. O&#x27;Neil" in html
