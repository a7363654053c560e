from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.rsvps.repository.orm_models import RSVP, Couple, GuestCategory


class Side(str, Enum):
    BRIDE = "BRIDE"
    GROOM = "GROOM"


class RSVPStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ApprovalAction(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"

    @property
    def target_status(self) -> RSVPStatus:
        if self is ApprovalAction.APPROVE:
            return RSVPStatus.APPROVED
        return RSVPStatus.REJECTED


@dataclass(frozen=True)
class CoupleDTO:
    """The authenticated administrator calling an admin endpoint."""

    uuid: UUID
    name: str
    email: str
    side: Side

    @classmethod
    def from_orm(cls, couple: "Couple") -> "CoupleDTO":
        return cls(
            uuid=couple.uuid,
            name=couple.name,
            email=couple.email,
            side=Side(couple.side),
        )


@dataclass(frozen=True)
class CategoryDTO:
    uuid: UUID
    name: str
    side: Side
    max_guests: int
    invitation_token: str
    is_default: bool
    couple_id: UUID

    @classmethod
    def from_orm(cls, category: "GuestCategory") -> "CategoryDTO":
        return cls(
            uuid=category.uuid,
            name=category.name,
            side=Side(category.side),
            max_guests=category.max_guests,
            invitation_token=category.invitation_token,
            is_default=category.is_default,
            couple_id=category.couple_id,
        )


@dataclass(frozen=True)
class CategoryCapacityDTO:
    """A category together with its live approved-guest aggregate."""

    category: CategoryDTO
    approved_guests: int

    @property
    def remaining_guests(self) -> int:
        # negative when a quota was lowered below the approved total
        return self.category.max_guests - self.approved_guests


@dataclass(frozen=True)
class InvitationMetaDTO:
    """Public view of a category, safe to show to anyone holding the link."""

    name: str
    side: Side
    remaining_guests: int


@dataclass(frozen=True)
class RSVPDTO:
    uuid: UUID
    guest_name: str
    email: str
    phone: str
    number_of_guests: int
    status: RSVPStatus
    side: Side
    category_id: UUID | None
    submitted_at: datetime

    @classmethod
    def from_orm(cls, rsvp: "RSVP") -> "RSVPDTO":
        return cls(
            uuid=rsvp.uuid,
            guest_name=rsvp.guest_name,
            email=rsvp.email,
            phone=rsvp.phone,
            number_of_guests=rsvp.number_of_guests,
            status=RSVPStatus(rsvp.status),
            side=Side(rsvp.side),
            category_id=rsvp.category_id,
            submitted_at=rsvp.submitted_at,
        )
