import logging
from collections.abc import Awaitable, Callable

from src.email_service.base import EmailServiceBase
from src.rsvps.dtos import RSVPDTO, RSVPStatus
from src.rsvps.errors import NotificationError

logger = logging.getLogger(__name__)


class RSVPNotifier:
    """Sends the one notice that matches an RSVP's status.

    Called after the RSVP change is committed. A failed send is logged and
    dropped, the committed state stands.
    """

    def __init__(self, email_service: EmailServiceBase | None = None) -> None:
        self._email_service = email_service
        self._senders: dict[RSVPStatus, Callable[[EmailServiceBase, RSVPDTO], Awaitable[None]]] = {
            RSVPStatus.APPROVED: self._send_confirmed,
            RSVPStatus.PENDING: self._send_received,
            RSVPStatus.REJECTED: self._send_rejected,
        }

    async def notify(self, rsvp: RSVPDTO) -> bool:
        """Returns whether the notice went out."""
        if self._email_service is None:
            return False

        sender = self._senders[rsvp.status]
        try:
            await sender(self._email_service, rsvp)
        except NotificationError as e:
            logger.error(
                "Could not send %s notice for RSVP %s: %s", rsvp.status.value, rsvp.uuid, e
            )
            return False
        except Exception:
            logger.exception(
                "Unexpected error sending %s notice for RSVP %s", rsvp.status.value, rsvp.uuid
            )
            return False
        return True

    @staticmethod
    async def _send_confirmed(email_service: EmailServiceBase, rsvp: RSVPDTO) -> None:
        await email_service.send_rsvp_confirmed(
            to_address=rsvp.email,
            guest_name=rsvp.guest_name,
            number_of_guests=rsvp.number_of_guests,
            rsvp_id=str(rsvp.uuid),
            phone=rsvp.phone,
        )

    @staticmethod
    async def _send_received(email_service: EmailServiceBase, rsvp: RSVPDTO) -> None:
        await email_service.send_rsvp_received(to_address=rsvp.email, guest_name=rsvp.guest_name)

    @staticmethod
    async def _send_rejected(email_service: EmailServiceBase, rsvp: RSVPDTO) -> None:
        await email_service.send_rsvp_rejected(to_address=rsvp.email, guest_name=rsvp.guest_name)
