from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.rsvps.dtos import ApprovalAction, RSVPStatus


class ApproveRSVPRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rsvp_id: UUID
    action: ApprovalAction
    # required when approving an RSVP that arrived without an invitation token
    category_id: UUID | None = None


class ApproveRSVPResponse(BaseModel):
    message: str
    status: RSVPStatus
