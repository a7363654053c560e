"""Admission decisions for new RSVPs.

Capacity overflow is never an error: an RSVP that does not fit is created
PENDING and left to the couple to triage.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.rsvps.dtos import CategoryDTO, RSVPStatus
from src.rsvps.repository import queries


def fits(max_guests: int, approved_guests: int, requested_guests: int) -> bool:
    return approved_guests + requested_guests <= max_guests


class AdmissionEvaluator:
    """Decides the initial status of an RSVP against its category's quota.

    Must be called inside the category's critical section, with the session of
    the transaction that will insert the RSVP.
    """

    async def evaluate(
        self,
        session: AsyncSession,
        category: CategoryDTO | None,
        requested_guests: int,
    ) -> RSVPStatus:
        if category is None:
            # open-form submissions are not counted against any quota
            return RSVPStatus.PENDING

        approved = await queries.approved_guest_aggregate(session, category.uuid)
        if fits(category.max_guests, approved, requested_guests):
            return RSVPStatus.APPROVED
        return RSVPStatus.PENDING
