"""Read model for the public invitation page.

Maps an invitation token to what a guest may see about its category. The
remaining capacity is a snapshot, it reserves nothing.
"""

from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps import tokens
from src.rsvps.dtos import InvitationMetaDTO, Side
from src.rsvps.errors import NotFoundError
from src.rsvps.repository import queries


class InvitationMetaReadModel(ABC):
    @abstractmethod
    async def get_public_meta(self, token: str) -> InvitationMetaDTO:
        """Get public category info by invitation token.

        Raises:
            ValidationError: the token is empty or malformed
            NotFoundError: no category owns the token
        """
        raise NotImplementedError


class SqlInvitationMetaReadModel(InvitationMetaReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_public_meta(self, token: str) -> InvitationMetaDTO:
        token = tokens.parse(token)

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_category_by_token(session, token)
            if category is None:
                raise NotFoundError("Invalid invitation link.")

            approved = await queries.approved_guest_aggregate(session, category.uuid)
            return InvitationMetaDTO(
                name=category.name,
                side=Side(category.side),
                remaining_guests=category.max_guests - approved,
            )
