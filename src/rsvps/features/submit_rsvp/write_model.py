"""Write model for guest RSVP submission.

Token submissions are admitted against the category quota inside the
category's critical section. Open-form submissions are always PENDING and
uncategorized. Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.email_service.base import EmailServiceBase
from src.rsvps import tokens
from src.rsvps.admission import AdmissionEvaluator
from src.rsvps.dtos import RSVPDTO, CategoryDTO, Side
from src.rsvps.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from src.rsvps.locks import CategoryLocks, category_locks
from src.rsvps.notifications import RSVPNotifier
from src.rsvps.repository import queries
from src.rsvps.repository.orm_models import RSVP

logger = logging.getLogger(__name__)

DUPLICATE_CONTACT_MESSAGE = "This email or phone number has already been used to RSVP."
INVALID_LINK_MESSAGE = "Invalid invitation link."


class SubmitRSVPWriteModel(ABC):
    """Abstract base class for RSVP submission."""

    @abstractmethod
    async def submit_rsvp(
        self,
        guest_name: str,
        email: str,
        phone: str,
        number_of_guests: int,
        token: str | None = None,
        selected_side: Side | None = None,
    ) -> RSVPDTO:
        """Create an RSVP and notify the guest.

        Args:
            guest_name: Name the RSVP is made under
            email: Guest email, unique across all RSVPs
            phone: Guest phone, unique across all RSVPs
            number_of_guests: Seats requested, counted against the quota
            token: Invitation token of a category (optional)
            selected_side: Side picked on the open form, used when no token is given

        Returns:
            The created RSVP, APPROVED if it fit the category quota, PENDING otherwise

        Raises:
            ValidationError: malformed token, or neither token nor side
            NotFoundError: no category owns the token
            ConflictError: email or phone already used
        """
        raise NotImplementedError


class SqlSubmitRSVPWriteModel(SubmitRSVPWriteModel):
    """SQL implementation of RSVP submission."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        email_service: EmailServiceBase | None = None,
        admission_evaluator: AdmissionEvaluator | None = None,
        locks: CategoryLocks | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.notifier = RSVPNotifier(email_service)
        self.admission_evaluator = admission_evaluator or AdmissionEvaluator()
        self.locks = locks or category_locks

    async def submit_rsvp(
        self,
        guest_name: str,
        email: str,
        phone: str,
        number_of_guests: int,
        token: str | None = None,
        selected_side: Side | None = None,
    ) -> RSVPDTO:
        guest_name = (guest_name or "").strip()
        phone = (phone or "").strip()
        if not guest_name or not phone:
            raise ValidationError("Missing required RSVP information.")

        if token:
            token = tokens.parse(token)
            category = await self._resolve_category(token)
            async with self.locks.hold(category.uuid):
                rsvp = await self._create_rsvp(
                    guest_name, email, phone, number_of_guests, category=category
                )
        elif selected_side:
            rsvp = await self._create_rsvp(
                guest_name, email, phone, number_of_guests, side=Side(selected_side)
            )
        else:
            raise ValidationError("Missing required RSVP information.")

        logger.info("RSVP %s submitted as %s", rsvp.uuid, rsvp.status.value)
        await self.notifier.notify(rsvp)
        return rsvp

    async def _resolve_category(self, token: str) -> CategoryDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            category = await queries.get_category_by_token(session, token)
            if category is None:
                raise NotFoundError(INVALID_LINK_MESSAGE)
            return CategoryDTO.from_orm(category)

    async def _create_rsvp(
        self,
        guest_name: str,
        email: str,
        phone: str,
        number_of_guests: int,
        category: CategoryDTO | None = None,
        side: Side | None = None,
    ) -> RSVPDTO:
        """Evaluate admission and insert in one transaction; commits before returning."""
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                if category is not None:
                    locked = await queries.lock_category(session, category.uuid)
                    if locked is None:
                        raise NotFoundError(INVALID_LINK_MESSAGE)
                    # quota may have been edited since the token was resolved
                    category = CategoryDTO.from_orm(locked)
                    side = category.side

                if await queries.find_rsvp_by_contact(session, email, phone) is not None:
                    raise ConflictError(DUPLICATE_CONTACT_MESSAGE)

                status = await self.admission_evaluator.evaluate(
                    session, category, number_of_guests
                )
                rsvp = RSVP(
                    guest_name=guest_name,
                    email=email,
                    phone=phone,
                    number_of_guests=number_of_guests,
                    status=status,
                    side=side,
                    category_id=category.uuid if category else None,
                )
                session.add(rsvp)
                await session.flush()
                return RSVPDTO.from_orm(rsvp)
        except IntegrityError as e:
            # a concurrent submission with the same contact won the insert
            logger.info("Duplicate RSVP rejected for %s: %s", email, e.orig)
            raise ConflictError(DUPLICATE_CONTACT_MESSAGE) from e
        except SQLAlchemyError as e:
            logger.exception("Error creating RSVP for %s", email)
            raise PersistenceError(f"Could not save RSVP: {e}") from e
