"""Email sender tests — SMTP is mocked, never contacted."""

from unittest.mock import AsyncMock

import aiosmtplib
import pytest

from pressroom.config import Settings
from pressroom.services import email_service
from pressroom.services.email_service import EmailSender


def _sender(**overrides) -> EmailSender:
    return EmailSender(Settings(**overrides))


@pytest.mark.asyncio
async def test_send_skipped_without_smtp_host(monkeypatch):
    mock_send = AsyncMock()
    monkeypatch.setattr(email_service.aiosmtplib, "send", mock_send)

    assert await _sender(smtp_host="").send("a@example.com", "Hi", "<p>hi</p>") is False
    mock_send.assert_not_called()


@pytest.mark.asyncio
async def test_send_html_message(monkeypatch):
    mock_send = AsyncMock()
    monkeypatch.setattr(email_service.aiosmtplib, "send", mock_send)

    sender = _sender(smtp_host="smtp.example.com", smtp_port=2525, email_from="news@example.com")
    assert await sender.send_welcome("reader@example.com") is True

    mock_send.assert_awaited_once()
    message = mock_send.await_args.args[0]
    assert message["To"] == "reader@example.com"
    assert message["From"] == "news@example.com"
    assert message["Subject"] == email_service.WELCOME_SUBJECT
    html = message.get_body(preferencelist=("html",))
    assert "Welcome!" in html.get_content()
    assert mock_send.await_args.kwargs["hostname"] == "smtp.example.com"
    assert mock_send.await_args.kwargs["port"] == 2525


@pytest.mark.asyncio
async def test_send_failure_returns_false(monkeypatch):
    monkeypatch.setattr(
        email_service.aiosmtplib,
        "send",
        AsyncMock(side_effect=aiosmtplib.SMTPException("relay denied")),
    )
    sender = _sender(smtp_host="smtp.example.com")
    assert await sender.send("a@example.com", "Hi", "<p>hi</p>") is False
