"""Write model for the couple's approve/reject decision.

PENDING is the only state an RSVP can leave. Approving always re-checks the
quota of the category the RSVP ends up in, inside that category's critical
section, so assigning a category and approving cannot overbook it.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.email_service.base import EmailServiceBase
from src.rsvps.admission import fits
from src.rsvps.dtos import RSVPDTO, ApprovalAction, RSVPStatus, Side
from src.rsvps.errors import (
    CapacityExceededError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.rsvps.locks import CategoryLocks, category_locks
from src.rsvps.notifications import RSVPNotifier
from src.rsvps.repository import queries
from src.rsvps.repository.orm_models import RSVP

logger = logging.getLogger(__name__)


class ApproveRSVPWriteModel(ABC):
    @abstractmethod
    async def approve_rsvp(
        self,
        rsvp_id: UUID,
        action: ApprovalAction,
        category_id: UUID | None = None,
        couple_id: UUID | None = None,
    ) -> RSVPDTO:
        """Approve or reject a pending RSVP and notify the guest.

        Args:
            rsvp_id: The RSVP to decide on
            action: APPROVE or REJECT
            category_id: Category to assign when approving an uncategorized RSVP.
                Ignored when the RSVP already has one.
            couple_id: The deciding couple. A newly assigned category must belong
                to it.

        Raises:
            NotFoundError: unknown RSVP or category
            ValidationError: approving an uncategorized RSVP without a category
            InvalidTransitionError: the RSVP is no longer PENDING
            CapacityExceededError: the category has no room for the RSVP's guests
        """
        raise NotImplementedError


class SqlApproveRSVPWriteModel(ApproveRSVPWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        email_service: EmailServiceBase | None = None,
        locks: CategoryLocks | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.notifier = RSVPNotifier(email_service)
        self.locks = locks or category_locks

    async def approve_rsvp(
        self,
        rsvp_id: UUID,
        action: ApprovalAction,
        category_id: UUID | None = None,
        couple_id: UUID | None = None,
    ) -> RSVPDTO:
        action = ApprovalAction(action)
        current = await self._get_rsvp(rsvp_id)
        _ensure_pending(current.status)

        if action is ApprovalAction.REJECT:
            rsvp = await self._reject(rsvp_id)
        else:
            target_category_id = current.category_id or category_id
            if target_category_id is None:
                raise ValidationError("A category must be assigned to approve this RSVP")
            async with self.locks.hold(target_category_id):
                rsvp = await self._approve(rsvp_id, target_category_id, couple_id)

        logger.info("RSVP %s %s", rsvp.uuid, rsvp.status.value.lower())
        await self.notifier.notify(rsvp)
        return rsvp

    async def _get_rsvp(self, rsvp_id: UUID) -> RSVPDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = await session.get(RSVP, rsvp_id)
            if rsvp is None:
                raise NotFoundError("RSVP not found")
            return RSVPDTO.from_orm(rsvp)

    async def _approve(
        self, rsvp_id: UUID, category_id: UUID, couple_id: UUID | None = None
    ) -> RSVPDTO:
        """Capacity check and status write in one transaction; commits before returning."""
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                category = await queries.lock_category(session, category_id)
                if category is None:
                    raise NotFoundError("Category not found")

                rsvp = await session.get(RSVP, rsvp_id, populate_existing=True)
                if rsvp is None:
                    raise NotFoundError("RSVP not found")
                _ensure_pending(rsvp.status)
                if rsvp.category_id is not None and rsvp.category_id != category_id:
                    raise ConflictError("RSVP was assigned to another category, please retry")
                assigning = rsvp.category_id is None
                if assigning and couple_id is not None and category.couple_id != couple_id:
                    # another couple's category is reported as missing
                    raise NotFoundError("Category not found")

                approved = await queries.approved_guest_aggregate(session, category_id)
                if not fits(category.max_guests, approved, rsvp.number_of_guests):
                    raise CapacityExceededError(
                        category_name=category.name,
                        remaining_guests=category.max_guests - approved,
                        requested_guests=rsvp.number_of_guests,
                    )

                return await self._transition(
                    session,
                    rsvp,
                    RSVPStatus.APPROVED,
                    category_id=category_id,
                    side=Side(category.side),
                )
        except SQLAlchemyError as e:
            logger.exception("Error approving RSVP %s", rsvp_id)
            raise PersistenceError(f"Could not approve RSVP: {e}") from e

    async def _reject(self, rsvp_id: UUID) -> RSVPDTO:
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                rsvp = await session.get(RSVP, rsvp_id, populate_existing=True)
                if rsvp is None:
                    raise NotFoundError("RSVP not found")
                return await self._transition(session, rsvp, RSVPStatus.REJECTED)
        except SQLAlchemyError as e:
            logger.exception("Error rejecting RSVP %s", rsvp_id)
            raise PersistenceError(f"Could not reject RSVP: {e}") from e

    async def _transition(
        self,
        session: AsyncSession,
        rsvp: RSVP,
        new_status: RSVPStatus,
        **values,
    ) -> RSVPDTO:
        """Move a PENDING RSVP to ``new_status``.

        The UPDATE only matches while the row is still PENDING, so of two
        concurrent decisions on the same RSVP exactly one succeeds.
        """
        result = await session.execute(
            update(RSVP)
            .where(RSVP.uuid == rsvp.uuid)
            .where(RSVP.status == RSVPStatus.PENDING)
            .values(status=new_status, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await session.refresh(rsvp)
            raise InvalidTransitionError(RSVPStatus(rsvp.status).value)

        await session.refresh(rsvp)
        return RSVPDTO.from_orm(rsvp)


def _ensure_pending(status: RSVPStatus | str) -> None:
    status = RSVPStatus(status)
    if status is not RSVPStatus.PENDING:
        raise InvalidTransitionError(status.value)
