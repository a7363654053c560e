"""Session-level queries shared by the registry, the admission evaluator and the lifecycle.

These run inside the caller's transaction so a read-decide-write sequence can
be kept atomic.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.rsvps.dtos import RSVPStatus, Side
from src.rsvps.repository.orm_models import RSVP, GuestCategory


async def get_category(session: AsyncSession, category_id: UUID) -> GuestCategory | None:
    return await session.get(GuestCategory, category_id)


async def lock_category(session: AsyncSession, category_id: UUID) -> GuestCategory | None:
    """Load the category row with a row lock held until the transaction ends.

    SQLite ignores FOR UPDATE, in-process callers also hold a per-category lock.
    """
    result = await session.execute(
        select(GuestCategory)
        .where(GuestCategory.uuid == category_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_category_by_token(session: AsyncSession, token: str) -> GuestCategory | None:
    result = await session.execute(
        select(GuestCategory).where(GuestCategory.invitation_token == token)
    )
    return result.scalar_one_or_none()


async def get_category_by_name(session: AsyncSession, name: str) -> GuestCategory | None:
    result = await session.execute(select(GuestCategory).where(GuestCategory.name == name))
    return result.scalar_one_or_none()


async def get_default_category(session: AsyncSession, side: Side) -> GuestCategory | None:
    result = await session.execute(
        select(GuestCategory)
        .where(GuestCategory.side == side)
        .where(GuestCategory.is_default.is_(True))
        .order_by(GuestCategory.created_at)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def approved_guest_aggregate(session: AsyncSession, category_id: UUID) -> int:
    """Sum of guests over APPROVED RSVPs of a category, recomputed on every call."""
    result = await session.execute(
        select(func.coalesce(func.sum(RSVP.number_of_guests), 0))
        .where(RSVP.category_id == category_id)
        .where(RSVP.status == RSVPStatus.APPROVED)
    )
    return int(result.scalar_one())


async def find_rsvp_by_contact(session: AsyncSession, email: str, phone: str) -> RSVP | None:
    result = await session.execute(
        select(RSVP).where((RSVP.email == email) | (RSVP.phone == phone)).limit(1)
    )
    return result.scalar_one_or_none()
