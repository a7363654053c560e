"""Tests for SqlCategoryRegistry."""

import asyncio
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_maker
from src.rsvps.dtos import RSVPStatus, Side
from src.rsvps.errors import ConflictError, NotFoundError, ValidationError
from src.rsvps.locks import CategoryLocks
from src.rsvps.repository.category_registry import SqlCategoryRegistry
from src.rsvps.repository.orm_models import RSVP
from src.rsvps.repository.read_models import SqlRSVPReadModel


async def _add_rsvp(category_id: UUID, guests: int, status: RSVPStatus, email: str) -> None:
    async with async_session_maker() as session:
        session.add(
            RSVP(
                guest_name="Guest",
                email=email,
                phone=email,
                number_of_guests=guests,
                status=status,
                side=Side.BRIDE,
                category_id=category_id,
            )
        )
        await session.commit()


async def test_create_category_generates_token(bride):
    registry = SqlCategoryRegistry()

    category = await registry.create_category(
        name="Bride's Family", side=Side.BRIDE, max_guests=100, couple_id=bride.uuid
    )

    assert category.name == "Bride's Family"
    assert category.side == Side.BRIDE
    assert category.max_guests == 100
    assert category.is_default is False
    assert str(UUID(category.invitation_token)) == category.invitation_token


async def test_create_category_with_explicit_token(bride):
    token = str(uuid4())
    registry = SqlCategoryRegistry()

    category = await registry.create_category(
        name="Bride's Friends",
        side=Side.BRIDE,
        max_guests=50,
        couple_id=bride.uuid,
        invitation_token=token.upper(),
    )

    assert category.invitation_token == token


async def test_create_category_session_overwrite_is_not_committed(bride):
    async with async_session_maker() as db_session:
        registry = SqlCategoryRegistry(session_overwrite=db_session)
        await registry.create_category(
            name="Rolled Back", side=Side.BRIDE, max_guests=5, couple_id=bride.uuid
        )
        await db_session.rollback()

    assert await SqlCategoryRegistry().get_category_by_name("Rolled Back") is None


async def test_create_category_rejects_duplicate_name(bride):
    registry = SqlCategoryRegistry()
    await registry.create_category(
        name="Colleagues", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )

    with pytest.raises(ConflictError):
        await registry.create_category(
            name="Colleagues", side=Side.BRIDE, max_guests=20, couple_id=bride.uuid
        )


async def test_create_category_rejects_duplicate_token(bride):
    token = str(uuid4())
    registry = SqlCategoryRegistry()
    await registry.create_category(
        name="One", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid, invitation_token=token
    )

    with pytest.raises(ConflictError):
        await registry.create_category(
            name="Two",
            side=Side.BRIDE,
            max_guests=10,
            couple_id=bride.uuid,
            invitation_token=token,
        )


@pytest.mark.parametrize(
    "name, max_guests, token",
    [
        ("   ", 10, None),
        ("Negative", -1, None),
        ("Bad token", 10, "not-a-uuid"),
    ],
)
async def test_create_category_validation(bride, name, max_guests, token):
    with pytest.raises(ValidationError):
        await SqlCategoryRegistry().create_category(
            name=name,
            side=Side.BRIDE,
            max_guests=max_guests,
            couple_id=bride.uuid,
            invitation_token=token,
        )


async def test_zero_quota_category_is_allowed(bride):
    category = await SqlCategoryRegistry().create_category(
        name="Closed", side=Side.BRIDE, max_guests=0, couple_id=bride.uuid
    )

    assert category.max_guests == 0


async def test_only_one_default_per_side(bride, groom):
    registry = SqlCategoryRegistry()
    await registry.create_category(
        name="Bride Default", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid, is_default=True
    )
    # the other side may still have its own default
    await registry.create_category(
        name="Groom Default", side=Side.GROOM, max_guests=10, couple_id=groom.uuid, is_default=True
    )

    with pytest.raises(ConflictError):
        await registry.create_category(
            name="Second Bride Default",
            side=Side.BRIDE,
            max_guests=10,
            couple_id=bride.uuid,
            is_default=True,
        )


async def test_resolve_by_token(bride):
    registry = SqlCategoryRegistry()
    created = await registry.create_category(
        name="Church", side=Side.BRIDE, max_guests=30, couple_id=bride.uuid
    )

    resolved = await registry.resolve_by_token(created.invitation_token)

    assert resolved == created


async def test_resolve_by_unknown_token():
    with pytest.raises(NotFoundError, match="Invalid invitation link."):
        await SqlCategoryRegistry().resolve_by_token(str(uuid4()))


async def test_resolve_default_for_side(bride):
    registry = SqlCategoryRegistry()
    await registry.create_category(
        name="Regular", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )
    default = await registry.create_category(
        name="Fallback", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid, is_default=True
    )

    assert await registry.resolve_default_for_side(Side.BRIDE) == default
    with pytest.raises(NotFoundError):
        await registry.resolve_default_for_side(Side.GROOM)


async def test_approved_guest_aggregate_counts_only_approved(bride):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Family", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )
    await _add_rsvp(category.uuid, 3, RSVPStatus.APPROVED, "a@example.com")
    await _add_rsvp(category.uuid, 2, RSVPStatus.APPROVED, "b@example.com")
    await _add_rsvp(category.uuid, 4, RSVPStatus.PENDING, "c@example.com")
    await _add_rsvp(category.uuid, 5, RSVPStatus.REJECTED, "d@example.com")

    assert await registry.approved_guest_aggregate(category.uuid) == 5
    assert await registry.remaining_capacity(category.uuid) == 5


async def test_approved_guest_aggregate_of_empty_category_is_zero(bride):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Empty", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )

    assert await registry.approved_guest_aggregate(category.uuid) == 0
    assert await registry.remaining_capacity(category.uuid) == 10


async def test_list_categories_only_returns_own(bride, groom):
    registry = SqlCategoryRegistry()
    mine = await registry.create_category(
        name="Mine", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )
    await registry.create_category(
        name="Theirs", side=Side.GROOM, max_guests=10, couple_id=groom.uuid
    )
    await _add_rsvp(mine.uuid, 4, RSVPStatus.APPROVED, "e@example.com")

    capacities = await registry.list_categories(bride.uuid)

    assert [c.category.name for c in capacities] == ["Mine"]
    assert capacities[0].approved_guests == 4
    assert capacities[0].remaining_guests == 6


async def test_update_category_lowering_quota_below_approved(bride):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Shrinking", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )
    await _add_rsvp(category.uuid, 8, RSVPStatus.APPROVED, "f@example.com")

    updated = await registry.update_category(category.uuid, bride.uuid, max_guests=5)

    assert updated.max_guests == 5
    # approved RSVPs are never revoked
    assert await registry.approved_guest_aggregate(category.uuid) == 8
    assert await registry.remaining_capacity(category.uuid) == -3


async def test_update_category_fields(bride):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Old Name", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )
    new_token = str(uuid4())

    updated = await registry.update_category(
        category.uuid,
        bride.uuid,
        name="New Name",
        invitation_token=new_token,
        is_default=True,
    )

    assert updated.name == "New Name"
    assert updated.invitation_token == new_token
    assert updated.is_default is True
    assert updated.max_guests == 10


async def test_update_category_of_another_couple_is_not_found(bride, groom):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Private", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )

    with pytest.raises(NotFoundError):
        await registry.update_category(category.uuid, groom.uuid, max_guests=1)


async def test_update_category_rejects_taken_name(bride):
    registry = SqlCategoryRegistry()
    await registry.create_category(
        name="Taken", side=Side.BRIDE, max_guests=1, couple_id=bride.uuid
    )
    category = await registry.create_category(
        name="Free", side=Side.BRIDE, max_guests=1, couple_id=bride.uuid
    )

    with pytest.raises(ConflictError):
        await registry.update_category(category.uuid, bride.uuid, name="Taken")


async def test_delete_category(bride):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Unused", side=Side.BRIDE, max_guests=1, couple_id=bride.uuid
    )

    await registry.delete_category(category.uuid, bride.uuid)

    with pytest.raises(NotFoundError):
        await registry.get_category(category.uuid)


async def test_delete_category_with_rsvps_is_refused(bride):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="In Use", side=Side.BRIDE, max_guests=5, couple_id=bride.uuid
    )
    await _add_rsvp(category.uuid, 1, RSVPStatus.PENDING, "g@example.com")

    with pytest.raises(ConflictError):
        await registry.delete_category(category.uuid, bride.uuid)


async def test_update_category_side_moves_its_rsvps(bride):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Moving", side=Side.BRIDE, max_guests=5, couple_id=bride.uuid
    )
    await _add_rsvp(category.uuid, 1, RSVPStatus.APPROVED, "h@example.com")

    updated = await registry.update_category(category.uuid, bride.uuid, side=Side.GROOM)

    assert updated.side == Side.GROOM
    read_model = SqlRSVPReadModel()
    assert [rsvp.email for rsvp in await read_model.list_rsvps(side=Side.GROOM)] == [
        "h@example.com"
    ]
    assert await read_model.list_rsvps(side=Side.BRIDE) == []


async def test_delete_category_waits_for_submission_in_flight(bride):
    locks = CategoryLocks()
    registry = SqlCategoryRegistry(locks=locks)
    category = await registry.create_category(
        name="Contended", side=Side.BRIDE, max_guests=5, couple_id=bride.uuid
    )

    async with locks.hold(category.uuid):
        delete = asyncio.create_task(registry.delete_category(category.uuid, bride.uuid))
        await asyncio.sleep(0)
        await _add_rsvp(category.uuid, 1, RSVPStatus.APPROVED, "i@example.com")

    with pytest.raises(ConflictError):
        await delete
    assert (await registry.get_category(category.uuid)).name == "Contended"


async def test_delete_category_losing_foreign_key_race_is_conflict(bride, monkeypatch):
    registry = SqlCategoryRegistry()
    category = await registry.create_category(
        name="Raced", side=Side.BRIDE, max_guests=5, couple_id=bride.uuid
    )

    async def flush(self, *args, **kwargs):
        raise IntegrityError("DELETE FROM guest_categories", {}, Exception("foreign key"))

    monkeypatch.setattr(AsyncSession, "flush", flush)

    with pytest.raises(ConflictError, match="still has RSVPs"):
        await registry.delete_category(category.uuid, bride.uuid)
