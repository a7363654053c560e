"""Request/response bodies for RSVP submission."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.rsvps.dtos import RSVPStatus, Side


class SubmitRSVPRequest(BaseModel):
    """Request body for an RSVP.

    ``token`` comes from an invitation link; without one the guest must pick
    a side on the open form.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=50)
    guests: int = Field(ge=1)
    token: str | None = None
    selected_side: Side | None = None


class SubmitRSVPResponse(BaseModel):
    success: bool = True
    status: RSVPStatus
