"""Couple write model - returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps.dtos import CoupleDTO, Side
from src.rsvps.errors import ConflictError, ValidationError
from src.rsvps.repository.orm_models import Couple

logger = logging.getLogger(__name__)


class CoupleWriteModel(ABC):
    @abstractmethod
    async def create_couple(self, name: str, email: str, side: Side) -> CoupleDTO:
        raise NotImplementedError


class SqlCoupleWriteModel(CoupleWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_couple(self, name: str, email: str, side: Side) -> CoupleDTO:
        if not name.strip() or not email.strip():
            raise ValidationError("Couple name and email are required")

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Couple).where(Couple.email == email))
            if result.scalar_one_or_none() is not None:
                raise ConflictError(f"A couple with email '{email}' already exists")

            couple = Couple(name=name.strip(), email=email.strip(), side=Side(side))
            session.add(couple)
            await session.flush()
            logger.info("Created couple %s (%s)", couple.name, couple.side)
            return CoupleDTO.from_orm(couple)
