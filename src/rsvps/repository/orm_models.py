from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp
from src.rsvps.dtos import RSVPStatus, Side

side_enum = Enum(Side, name="side_enum", values_callable=lambda x: [e.value for e in x])


class Couple(Base, TimeStamp):
    __tablename__ = TableNames.COUPLES.value

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    side: Mapped[str] = mapped_column(side_enum, nullable=False)

    categories: Mapped[list["GuestCategory"]] = relationship(
        "GuestCategory", back_populates="couple"
    )

    def __repr__(self) -> str:
        return f"<Couple {self.email} ({self.side})>"


class GuestCategory(Base, TimeStamp):
    __tablename__ = TableNames.GUEST_CATEGORIES.value
    __table_args__ = (
        CheckConstraint("max_guests >= 0", name="ck_guest_categories_max_guests"),
        # at most one default category per side
        Index(
            "uq_guest_categories_default_side",
            "side",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default = 1"),
        ),
    )

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    side: Mapped[str] = mapped_column(side_enum, nullable=False, index=True)
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    invitation_token: Mapped[str] = mapped_column(
        String(36), unique=True, nullable=False, index=True
    )
    # catch-all bucket for a side
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    couple_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.COUPLES.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    couple: Mapped["Couple"] = relationship("Couple", back_populates="categories")

    def __repr__(self) -> str:
        return f"<GuestCategory {self.name} max={self.max_guests}>"


class RSVP(Base, TimeStamp):
    __tablename__ = TableNames.RSVPS.value
    __table_args__ = (
        CheckConstraint("number_of_guests >= 1", name="ck_rsvps_number_of_guests"),
    )

    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(RSVPStatus, name="rsvp_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=RSVPStatus.PENDING,
        nullable=False,
        index=True,
    )
    # the category's side, or the side picked on the open form until a category is assigned
    side: Mapped[str] = mapped_column(side_enum, nullable=False, index=True)
    # null only for open-form submissions not yet triaged
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.GUEST_CATEGORIES.value}.uuid", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<RSVP {self.email} - {self.status}>"
