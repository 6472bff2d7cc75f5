# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Email sending service. Logs to console when SMTP not configured."""

import asyncio
import logging
import smtplib
from email.mime.text import MIMEText

from taskboard_server.config import settings
from taskboard_server.errors import DeliveryError

logger = logging.getLogger(__name__)


def _send_smtp(to: str, subject: str, body: str) -> None:
    msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.starttls()
        if settings.smtp_user:
            server.login(settings.smtp_user, settings.smtp_password or "")
        server.sendmail(settings.smtp_from, [to], msg.as_string())


async def send_email(to: str, subject: str, body: str) -> None:
    """Send a plain-text email. Raises DeliveryError if the SMTP server rejects it."""
    if not settings.smtp_host:
        logger.info("Email (SMTP not configured): To=%s Subject=%s Body=%s", to, subject, body[:200])
        return
    try:
        await asyncio.to_thread(_send_smtp, to, subject, body)
    except (smtplib.SMTPException, OSError) as e:
        raise DeliveryError(f"Failed to send email to {to}: {e}") from e


async def send_verification_email(to: str, code: int) -> None:
    """Email a registration verification code."""
    await send_email(
        to,
        "Your Taskboard verification code",
        f"Your verification code is: {code}\n\n"
        f"Enter this code in the app to complete registration.\n\n"
        f"The code expires in {settings.verification_code_ttl_minutes} minutes.",
    )
