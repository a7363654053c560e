import abc
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.dtos import RSVPDTO, CoupleDTO, RSVPStatus, Side
from src.rsvps.errors import NotFoundError
from src.rsvps.repository import queries
from src.rsvps.repository.orm_models import RSVP, Couple


class CoupleReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_couple(self, couple_id: UUID) -> CoupleDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_couple_by_email(self, email: str) -> CoupleDTO | None:
        raise NotImplementedError


class SqlCoupleReadModel(CoupleReadModel):
    """SQL implementation of couple read model."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_couple(self, couple_id: UUID) -> CoupleDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            couple = await session.get(Couple, couple_id)
            return CoupleDTO.from_orm(couple) if couple else None

    async def get_couple_by_email(self, email: str) -> CoupleDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Couple).where(Couple.email == email))
            couple = result.scalar_one_or_none()
            return CoupleDTO.from_orm(couple) if couple else None


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_rsvps(
        self,
        status: RSVPStatus | None = None,
        side: Side | None = None,
    ) -> list[RSVPDTO]:
        """
        List RSVPs oldest first, optionally filtered by status and side.
        Open-form RSVPs match the side the guest picked.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def list_rsvps_for_category(self, category_id: UUID, couple_id: UUID) -> list[RSVPDTO]:
        """List RSVPs of a category owned by ``couple_id``, newest first."""
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def list_rsvps(
        self,
        status: RSVPStatus | None = None,
        side: Side | None = None,
    ) -> list[RSVPDTO]:
        stmt = select(RSVP)
        if status is not None:
            stmt = stmt.where(RSVP.status == status)
        if side is not None:
            stmt = stmt.where(RSVP.side == side)
        stmt = stmt.order_by(RSVP.submitted_at.asc())

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(stmt)
            return [RSVPDTO.from_orm(rsvp) for rsvp in result.scalars().all()]

    async def list_rsvps_for_category(self, category_id: UUID, couple_id: UUID) -> list[RSVPDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_category(session, category_id)
            if category is None or category.couple_id != couple_id:
                raise NotFoundError("Category not found")

            result = await session.execute(
                select(RSVP)
                .where(RSVP.category_id == category_id)
                .order_by(RSVP.submitted_at.desc())
            )
            return [RSVPDTO.from_orm(rsvp) for rsvp in result.scalars().all()]
