from fastapi import APIRouter, Depends, status

from src.email_service import get_email_service
from src.rsvps.features.submit_rsvp.dtos import SubmitRSVPRequest, SubmitRSVPResponse
from src.rsvps.features.submit_rsvp.write_model import (
    SqlSubmitRSVPWriteModel,
    SubmitRSVPWriteModel,
)
from src.rsvps.urls import SUBMIT_RSVP_URL

router = APIRouter()


def get_submit_rsvp_write_model() -> SubmitRSVPWriteModel:
    """Dependency to get RSVP submission write model instance."""
    return SqlSubmitRSVPWriteModel(
        email_service=get_email_service(),
    )


@router.post(
    SUBMIT_RSVP_URL,
    response_model=SubmitRSVPResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_rsvp(
    request: SubmitRSVPRequest,
    write_model: SubmitRSVPWriteModel = Depends(get_submit_rsvp_write_model),
) -> SubmitRSVPResponse:
    """
    Submit an RSVP.

    With an invitation token the RSVP is approved straight away when the
    category still has room for all guests, and left pending otherwise.
    Without a token a side must be selected and the RSVP waits for the couple.
    """
    rsvp = await write_model.submit_rsvp(
        guest_name=request.name,
        email=request.email,
        phone=request.phone,
        number_of_guests=request.guests,
        token=request.token,
        selected_side=request.selected_side,
    )
    return SubmitRSVPResponse(status=rsvp.status)
