from uuid import UUID

from pydantic import BaseModel, Field

from src.config.settings import settings
from src.rsvps.dtos import CategoryCapacityDTO, CategoryDTO, Side


class CreateCategoryRequest(BaseModel):
    name: str
    side: Side
    max_guests: int
    invitation_token: str | None = None
    is_default: bool = False


class UpdateCategoryRequest(BaseModel):
    """Only the fields present in the body are changed."""

    name: str | None = None
    side: Side | None = None
    max_guests: int | None = None
    invitation_token: str | None = None
    is_default: bool | None = None


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    side: Side
    max_guests: int
    invitation_token: str
    invitation_link: str
    is_default: bool
    couple_id: UUID
    approved_guests: int | None = None
    remaining_guests: int | None = Field(
        default=None, description="Negative when the quota was lowered below approved guests"
    )

    @classmethod
    def from_dto(
        cls, category: CategoryDTO, approved_guests: int | None = None
    ) -> "CategoryResponse":
        remaining = None
        if approved_guests is not None:
            remaining = category.max_guests - approved_guests
        return cls(
            id=category.uuid,
            name=category.name,
            side=category.side,
            max_guests=category.max_guests,
            invitation_token=category.invitation_token,
            invitation_link=settings.invitation_link(category.invitation_token),
            is_default=category.is_default,
            couple_id=category.couple_id,
            approved_guests=approved_guests,
            remaining_guests=remaining,
        )

    @classmethod
    def from_capacity(cls, capacity: CategoryCapacityDTO) -> "CategoryResponse":
        return cls.from_dto(capacity.category, approved_guests=capacity.approved_guests)
