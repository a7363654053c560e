import logging

from fastapi import APIRouter, Depends

from src.auth.dependencies import get_current_couple
from src.email_service import get_email_service
from src.rsvps.dtos import CoupleDTO
from src.rsvps.features.approve_rsvp.dtos import ApproveRSVPRequest, ApproveRSVPResponse
from src.rsvps.features.approve_rsvp.write_model import (
    ApproveRSVPWriteModel,
    SqlApproveRSVPWriteModel,
)
from src.rsvps.urls import ADMIN_APPROVE_RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


def get_approve_rsvp_write_model() -> ApproveRSVPWriteModel:
    """Dependency to get approve RSVP write model instance."""
    return SqlApproveRSVPWriteModel(
        email_service=get_email_service(),
    )


@router.post(ADMIN_APPROVE_RSVP_URL, response_model=ApproveRSVPResponse)
async def approve_rsvp(
    request: ApproveRSVPRequest,
    couple: CoupleDTO = Depends(get_current_couple),
    write_model: ApproveRSVPWriteModel = Depends(get_approve_rsvp_write_model),
) -> ApproveRSVPResponse:
    """
    Approve or reject a pending RSVP.

    Approving an RSVP that came in through the open form needs a categoryId.
    Approval fails with 409 when the category has no room left.
    """
    logger.info("%s requested %s of RSVP %s", couple.email, request.action.value, request.rsvp_id)
    rsvp = await write_model.approve_rsvp(
        rsvp_id=request.rsvp_id,
        action=request.action,
        category_id=request.category_id,
        couple_id=couple.uuid,
    )
    return ApproveRSVPResponse(
        message="RSVP status updated successfully.",
        status=rsvp.status,
    )
