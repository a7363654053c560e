import logging
from typing import Protocol

import httpx

from src.email_service.templated import TemplatedEmailService, WeddingDetailsConfig
from src.rsvps.errors import NotificationError

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(WeddingDetailsConfig, Protocol):
    resend_api_key: str
    emails_from: str
    email_sender_name: str


class ResendEmailService(TemplatedEmailService):
    def __init__(
        self,
        config: ResendEmailConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        super().__init__(config)
        self._config = config
        self._http_client_class = http_client_class

    async def _send(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> None:
        """Send email via Resend."""
        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    RESEND_EMAILS_URL,
                    headers={
                        "Authorization": f"Bearer {self._config.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": f"{self._config.email_sender_name} <{self._config.emails_from}>",
                        "to": [to_address],
                        "subject": subject,
                        "html": html_body,
                        "text": text_body,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationError(f"Resend rejected email to {to_address}: {e}") from e

        resend_email_id = response.json().get("id")
        if not resend_email_id:
            raise NotificationError(f"Resend returned no email id for {to_address}")
        logger.info("Sent '%s' to %s (resend id %s)", subject, to_address, resend_email_id)
