"""Guest category registry.

Owns category definitions and the live approved-guest aggregate per category.
Returns DTOs, never ORM models.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.rsvps import tokens
from src.rsvps.dtos import CategoryCapacityDTO, CategoryDTO, Side
from src.rsvps.errors import ConflictError, NotFoundError, ValidationError
from src.rsvps.locks import CategoryLocks, category_locks
from src.rsvps.repository import queries
from src.rsvps.repository.orm_models import RSVP, GuestCategory

logger = logging.getLogger(__name__)

# sentinel for "leave unchanged" in update_category
UNSET = object()

DUPLICATE_MESSAGE = "A category with that name or token already exists"
IN_USE_MESSAGE = "Category still has RSVPs and cannot be deleted"


class CategoryRegistry(ABC):
    @abstractmethod
    async def create_category(
        self,
        name: str,
        side: Side,
        max_guests: int,
        couple_id: UUID,
        invitation_token: str | None = None,
        is_default: bool = False,
    ) -> CategoryDTO:
        """Create a category. A token is generated when none is given.

        Raises:
            ValidationError: blank name, negative quota or malformed token
            ConflictError: name or token taken, or the side already has a default
        """
        raise NotImplementedError

    @abstractmethod
    async def get_category(self, category_id: UUID) -> CategoryDTO:
        raise NotImplementedError

    @abstractmethod
    async def resolve_by_token(self, token: str) -> CategoryDTO:
        raise NotImplementedError

    @abstractmethod
    async def resolve_default_for_side(self, side: Side) -> CategoryDTO:
        raise NotImplementedError

    @abstractmethod
    async def approved_guest_aggregate(self, category_id: UUID) -> int:
        raise NotImplementedError

    @abstractmethod
    async def remaining_capacity(self, category_id: UUID) -> int:
        raise NotImplementedError

    @abstractmethod
    async def list_categories(self, couple_id: UUID) -> list[CategoryCapacityDTO]:
        raise NotImplementedError

    @abstractmethod
    async def update_category(
        self,
        category_id: UUID,
        couple_id: UUID,
        name=UNSET,
        side=UNSET,
        max_guests=UNSET,
        invitation_token=UNSET,
        is_default=UNSET,
    ) -> CategoryDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_category(self, category_id: UUID, couple_id: UUID) -> None:
        raise NotImplementedError


class SqlCategoryRegistry(CategoryRegistry):
    """SQL implementation of the category registry."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        locks: CategoryLocks | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.locks = locks or category_locks

    async def create_category(
        self,
        name: str,
        side: Side,
        max_guests: int,
        couple_id: UUID,
        invitation_token: str | None = None,
        is_default: bool = False,
    ) -> CategoryDTO:
        name = _validate_name(name)
        side = Side(side)
        _validate_max_guests(max_guests)
        token = tokens.parse(invitation_token) if invitation_token else str(uuid4())

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await self._check_unique(session, name=name, token=token)
            if is_default:
                await self._check_default_free(session, side)

            category = GuestCategory(
                name=name,
                side=Side(side),
                max_guests=max_guests,
                invitation_token=token,
                is_default=is_default,
                couple_id=couple_id,
            )
            session.add(category)
            await self._flush(session)
            logger.info("Created category %s (%s, max %d)", name, side.value, max_guests)
            return CategoryDTO.from_orm(category)

    async def get_category(self, category_id: UUID) -> CategoryDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_category(session, category_id)
            if category is None:
                raise NotFoundError("Category not found")
            return CategoryDTO.from_orm(category)

    async def get_category_by_name(self, name: str) -> CategoryDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_category_by_name(session, name)
            return CategoryDTO.from_orm(category) if category else None

    async def resolve_by_token(self, token: str) -> CategoryDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_category_by_token(session, token)
            if category is None:
                raise NotFoundError("Invalid invitation link.")
            return CategoryDTO.from_orm(category)

    async def resolve_default_for_side(self, side: Side) -> CategoryDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_default_category(session, side)
            if category is None:
                raise NotFoundError(f"No default category configured for {side.value}")
            return CategoryDTO.from_orm(category)

    async def approved_guest_aggregate(self, category_id: UUID) -> int:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            return await queries.approved_guest_aggregate(session, category_id)

    async def remaining_capacity(self, category_id: UUID) -> int:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_category(session, category_id)
            if category is None:
                raise NotFoundError("Category not found")
            approved = await queries.approved_guest_aggregate(session, category_id)
            return category.max_guests - approved

    async def list_categories(self, couple_id: UUID) -> list[CategoryCapacityDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(GuestCategory)
                .where(GuestCategory.couple_id == couple_id)
                .order_by(GuestCategory.created_at, GuestCategory.name)
            )
            categories = result.scalars().all()

            capacities = []
            for category in categories:
                approved = await queries.approved_guest_aggregate(session, category.uuid)
                capacities.append(
                    CategoryCapacityDTO(
                        category=CategoryDTO.from_orm(category),
                        approved_guests=approved,
                    )
                )
            return capacities

    async def update_category(
        self,
        category_id: UUID,
        couple_id: UUID,
        name=UNSET,
        side=UNSET,
        max_guests=UNSET,
        invitation_token=UNSET,
        is_default=UNSET,
    ) -> CategoryDTO:
        """Update an owned category. Lowering the quota is never capacity-checked.

        A side change is copied onto the RSVPs filed under the category.
        """
        async with (
            self.locks.hold(category_id),
            self.async_session_manager(session_overwrite=self.session_overwrite) as session,
        ):
            category = await self._get_owned(session, category_id, couple_id)

            if name is not UNSET:
                name = _validate_name(name)
                if name != category.name:
                    await self._check_unique(session, name=name)
                category.name = name
            if max_guests is not UNSET:
                _validate_max_guests(max_guests)
                category.max_guests = max_guests
            if invitation_token is not UNSET:
                token = tokens.parse(invitation_token)
                if token != category.invitation_token:
                    await self._check_unique(session, token=token)
                category.invitation_token = token
            if side is not UNSET and Side(side) != Side(category.side):
                category.side = Side(side)
                await session.execute(
                    update(RSVP)
                    .where(RSVP.category_id == category.uuid)
                    .values(side=category.side)
                    .execution_options(synchronize_session=False)
                )
            if is_default is not UNSET:
                category.is_default = is_default
            if category.is_default:
                await self._check_default_free(
                    session, Side(category.side), exclude_id=category.uuid
                )

            await self._flush(session)
            return CategoryDTO.from_orm(category)

    async def delete_category(self, category_id: UUID, couple_id: UUID) -> None:
        async with (
            self.locks.hold(category_id),
            self.async_session_manager(session_overwrite=self.session_overwrite) as session,
        ):
            category = await self._get_owned(session, category_id, couple_id)
            result = await session.execute(
                select(func.count(RSVP.uuid)).where(RSVP.category_id == category_id)
            )
            if result.scalar_one():
                raise ConflictError(IN_USE_MESSAGE)
            await session.delete(category)
            await self._flush(session, conflict_message=IN_USE_MESSAGE)
            logger.info("Deleted category %s", category.name)

    async def _get_owned(
        self, session: AsyncSession, category_id: UUID, couple_id: UUID
    ) -> GuestCategory:
        # row lock orders this against submissions and approvals on other workers
        category = await queries.lock_category(session, category_id)
        # another couple's category is reported as missing
        if category is None or category.couple_id != couple_id:
            raise NotFoundError("Category not found")
        return category

    async def _check_unique(
        self, session: AsyncSession, name: str | None = None, token: str | None = None
    ) -> None:
        if name is not None and await queries.get_category_by_name(session, name):
            raise ConflictError(f"A category named '{name}' already exists")
        if token is not None and await queries.get_category_by_token(session, token):
            raise ConflictError("Invitation token is already in use")

    async def _check_default_free(
        self, session: AsyncSession, side: Side, exclude_id: UUID | None = None
    ) -> None:
        existing = await queries.get_default_category(session, side)
        if existing is not None and existing.uuid != exclude_id:
            raise ConflictError(f"{side.value} already has a default category ({existing.name})")

    async def _flush(
        self, session: AsyncSession, conflict_message: str = DUPLICATE_MESSAGE
    ) -> None:
        try:
            await session.flush()
        except IntegrityError as e:
            # lost a race against a concurrent write to the same name, token or category
            logger.warning("Category integrity error: %s", e)
            raise ConflictError(conflict_message) from e


def _validate_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    return name


def _validate_max_guests(max_guests: int) -> None:
    if max_guests < 0:
        raise ValidationError("Maximum guests cannot be negative")
