from abc import ABC, abstractmethod


class EmailServiceBase(ABC):
    """Transport for RSVP notices.

    Implementations raise ``NotificationError`` when the message could not be
    handed to the provider.
    """

    @abstractmethod
    async def send_rsvp_confirmed(
        self,
        to_address: str,
        guest_name: str,
        number_of_guests: int,
        rsvp_id: str,
        phone: str,
    ) -> None:
        pass

    @abstractmethod
    async def send_rsvp_received(self, to_address: str, guest_name: str) -> None:
        pass

    @abstractmethod
    async def send_rsvp_rejected(self, to_address: str, guest_name: str) -> None:
        pass
