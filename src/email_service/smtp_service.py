import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.config.settings import Settings
from src.email_service.templated import TemplatedEmailService
from src.rsvps.errors import NotificationError

logger = logging.getLogger(__name__)


class SMTPEmailService(TemplatedEmailService):
    def __init__(self, config: Settings):
        super().__init__(config)
        self.host = config.smtp_host
        self.port = config.smtp_port
        self.username = config.smtp_user
        self.password = config.smtp_password
        self.from_address = f"{config.email_sender_name} <{config.emails_from}>"

    def _create_message(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address

        part1 = MIMEText(text_body, "plain")
        part2 = MIMEText(html_body, "html")
        msg.attach(part1)
        msg.attach(part2)

        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        if self.username and self.password:
            with smtplib.SMTP(self.host, self.port) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        else:
            # For development/testing without authentication
            with smtplib.SMTP(self.host, self.port) as server:
                server.send_message(msg)

    async def _send(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> None:
        msg = self._create_message(to_address, subject, html_body, text_body)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery to {to_address} failed: {e}") from e
        logger.info("Sent '%s' to %s via SMTP", subject, to_address)
