# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Email delivery: SMTP failures and the unconfigured (log only) mode."""

import logging
import smtplib

import pytest

from taskboard_server.errors import DeliveryError
from taskboard_server.services.email import send_verification_email

pytestmark = pytest.mark.anyio


async def test_smtp_failure_raises_delivery_error(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr("taskboard_server.services.email.settings.smtp_host", "127.0.0.1")
    monkeypatch.setattr("taskboard_server.services.email.settings.smtp_port", 1)
    monkeypatch.setattr(smtplib, "SMTP", refuse)
    with pytest.raises(DeliveryError):
        await send_verification_email("user@example.com", 123456)


async def test_smtp_protocol_error_raises_delivery_error(monkeypatch):
    class RejectingSMTP:
        def __init__(self, *args, **kwargs):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            raise smtplib.SMTPNotSupportedError("STARTTLS extension not supported")

    monkeypatch.setattr("taskboard_server.services.email.settings.smtp_host", "mail.example.com")
    monkeypatch.setattr(smtplib, "SMTP", RejectingSMTP)
    with pytest.raises(DeliveryError):
        await send_verification_email("user@example.com", 123456)


async def test_without_smtp_the_message_is_logged(monkeypatch, caplog):
    monkeypatch.setattr("taskboard_server.services.email.settings.smtp_host", None)
    caplog.set_level(logging.INFO, logger="taskboard_server.services.email")
    await send_verification_email("user@example.com", 654321)
    assert "To=user@example.com" in caplog.text
    assert "654321" in caplog.text
