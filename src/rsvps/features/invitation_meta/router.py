from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.rsvps.dtos import Side
from src.rsvps.features.invitation_meta.read_model import (
    InvitationMetaReadModel,
    SqlInvitationMetaReadModel,
)
from src.rsvps.urls import INVITATION_META_URL

router = APIRouter()


class InvitationMetaResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    side: Side
    remaining_guests: int


def get_invitation_meta_read_model() -> InvitationMetaReadModel:
    """Dependency to get invitation meta read model instance."""
    return SqlInvitationMetaReadModel()


@router.get(INVITATION_META_URL, response_model=InvitationMetaResponse)
async def get_invitation_meta(
    token: str = "",
    read_model: InvitationMetaReadModel = Depends(get_invitation_meta_read_model),
) -> InvitationMetaResponse:
    """
    Get the public details of an invitation link.

    Returns the category name, side and how many guest spots are left.
    The remaining count is informational and is not held for the caller.
    """
    meta = await read_model.get_public_meta(token)
    return InvitationMetaResponse(
        name=meta.name,
        side=meta.side,
        remaining_guests=meta.remaining_guests,
    )
