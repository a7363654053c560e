from abc import abstractmethod
from typing import Protocol

from src.email_service.base import EmailServiceBase
from src.email_service.qr import check_in_payload, generate_qr_code_data_url
from src.email_service.templates import EmailTemplates


class WeddingDetailsConfig(Protocol):
    couple_names: str
    wedding_date: str
    wedding_location: str


class TemplatedEmailService(EmailServiceBase):
    """Renders the RSVP notices and leaves delivery to ``_send``."""

    def __init__(self, config: WeddingDetailsConfig) -> None:
        self._config = config

    @abstractmethod
    async def _send(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> None:
        pass

    def _render(self, html_content: str, text_content: str, **context) -> tuple[str, str]:
        return EmailTemplates.render(
            html_content,
            text_content,
            couple_names=self._config.couple_names,
            wedding_date=self._config.wedding_date,
            wedding_location=self._config.wedding_location,
            **context,
        )

    async def send_rsvp_confirmed(
        self,
        to_address: str,
        guest_name: str,
        number_of_guests: int,
        rsvp_id: str,
        phone: str,
    ) -> None:
        qr_code_url = generate_qr_code_data_url(check_in_payload(rsvp_id, guest_name, phone))
        html_body, text_body = self._render(
            EmailTemplates.CONFIRMED_HTML,
            EmailTemplates.CONFIRMED_TEXT,
            guest_name=guest_name,
            number_of_guests=number_of_guests,
            phone=phone,
            qr_code_url=qr_code_url,
        )
        await self._send(to_address, EmailTemplates.CONFIRMED_SUBJECT, html_body, text_body)

    async def send_rsvp_received(self, to_address: str, guest_name: str) -> None:
        html_body, text_body = self._render(
            EmailTemplates.RECEIVED_HTML,
            EmailTemplates.RECEIVED_TEXT,
            guest_name=guest_name,
        )
        await self._send(to_address, EmailTemplates.RECEIVED_SUBJECT, html_body, text_body)

    async def send_rsvp_rejected(self, to_address: str, guest_name: str) -> None:
        html_body, text_body = self._render(
            EmailTemplates.REJECTED_HTML,
            EmailTemplates.REJECTED_TEXT,
            guest_name=guest_name,
        )
        await self._send(to_address, EmailTemplates.REJECTED_SUBJECT, html_body, text_body)
