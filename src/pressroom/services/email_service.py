"""Email service — outgoing HTML mail over SMTP.

Learn: Sending is fire-and-forget. Callers schedule send() as a
background task after the response is written; a failure is logged
and reported as False, never raised, and never retried.
"""

from email.message import EmailMessage

import aiosmtplib
import structlog

from pressroom.config import Settings

logger = structlog.get_logger(__name__)

WELCOME_SUBJECT = "Thanks for Subscribing!"
WELCOME_BODY = "<h2>Welcome!</h2><p>You're now subscribed to our updates 🎉</p>"


class EmailSender:
    """SMTP sender configured from Settings."""

    def __init__(self, config: Settings):
        self.config = config

    @property
    def enabled(self) -> bool:
        return bool(self.config.smtp_host)

    def build_message(self, to: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.email_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html_body, subtype="html")
        return message

    async def send(self, to: str, subject: str, html_body: str) -> bool:
        """Send an HTML email.

        Returns True on success, False on failure or when SMTP is not
        configured.
        """
        if not self.enabled:
            logger.info("email_skipped", to=to, subject=subject, reason="smtp_disabled")
            return False

        message = self.build_message(to, subject, html_body)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.config.smtp_host,
                port=self.config.smtp_port,
                username=self.config.smtp_username or None,
                password=self.config.smtp_password or None,
                use_tls=self.config.smtp_use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("email_failed", to=to, subject=subject, error=str(e))
            return False

        logger.info("email_sent", to=to, subject=subject)
        return True

    async def send_welcome(self, to: str) -> bool:
        return await self.send(to, WELCOME_SUBJECT, WELCOME_BODY)
