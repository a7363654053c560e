from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from src.auth.dependencies import get_current_couple
from src.rsvps.dtos import RSVPDTO, CoupleDTO, RSVPStatus, Side
from src.rsvps.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from src.rsvps.urls import ADMIN_CATEGORY_RSVPS_URL, ADMIN_LIST_RSVPS_URL

router = APIRouter()


class RSVPResponse(BaseModel):
    id: UUID
    guest_name: str
    number_of_guests: int
    email: str
    phone: str
    status: RSVPStatus
    side: Side
    category_id: UUID | None = None
    submitted_at: datetime

    @classmethod
    def from_dto(cls, rsvp: RSVPDTO) -> "RSVPResponse":
        return cls(
            id=rsvp.uuid,
            guest_name=rsvp.guest_name,
            number_of_guests=rsvp.number_of_guests,
            email=rsvp.email,
            phone=rsvp.phone,
            status=rsvp.status,
            side=rsvp.side,
            category_id=rsvp.category_id,
            submitted_at=rsvp.submitted_at,
        )


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


@router.get(ADMIN_LIST_RSVPS_URL, response_model=list[RSVPResponse])
async def list_rsvps(
    status: RSVPStatus | None = None,
    own_side: bool = Query(False, alias="ownSide"),
    couple: CoupleDTO = Depends(get_current_couple),
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> list[RSVPResponse]:
    """
    List RSVPs, oldest first.

    Filter by status with ?status=PENDING and restrict to the caller's side
    with ?ownSide=true. Uncategorized RSVPs belong to the side the guest picked.
    """
    rsvps = await read_model.list_rsvps(
        status=status,
        side=couple.side if own_side else None,
    )
    return [RSVPResponse.from_dto(rsvp) for rsvp in rsvps]


@router.get(ADMIN_CATEGORY_RSVPS_URL, response_model=list[RSVPResponse])
async def list_category_rsvps(
    category_id: UUID,
    couple: CoupleDTO = Depends(get_current_couple),
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> list[RSVPResponse]:
    """List the RSVPs of one of the caller's categories, newest first."""
    rsvps = await read_model.list_rsvps_for_category(category_id, couple.uuid)
    return [RSVPResponse.from_dto(rsvp) for rsvp in rsvps]
