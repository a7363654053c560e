from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from src.auth.dependencies import get_current_couple
from src.rsvps.dtos import RSVPDTO, ApprovalAction, CoupleDTO, RSVPStatus, Side
from src.rsvps.errors import CapacityExceededError, InvalidTransitionError, ValidationError
from src.rsvps.features.approve_rsvp.router import get_approve_rsvp_write_model
from src.rsvps.features.approve_rsvp.write_model import ApproveRSVPWriteModel
from src.rsvps.features.submit_rsvp.write_model import SqlSubmitRSVPWriteModel
from src.rsvps.repository.category_registry import SqlCategoryRegistry
from src.rsvps.urls import ADMIN_APPROVE_RSVP_URL

COUPLE = CoupleDTO(uuid=uuid4(), name="Diamond", email="bride@example.com", side=Side.BRIDE)


class InMemoryApproveRSVPWriteModel(ApproveRSVPWriteModel):
    """In-memory write model for testing."""

    def __init__(self, memory: dict, error=None):
        self._memory = memory
        self._error = error

    async def approve_rsvp(
        self,
        rsvp_id: UUID,
        action: ApprovalAction,
        category_id: UUID | None = None,
        couple_id: UUID | None = None,
    ) -> RSVPDTO:
        if self._error is not None:
            raise self._error
        self._memory[rsvp_id] = {
            "action": action,
            "category_id": category_id,
            "couple_id": couple_id,
        }
        return RSVPDTO(
            uuid=rsvp_id,
            guest_name="Ada",
            email="ada@example.com",
            phone="0801",
            number_of_guests=1,
            status=action.target_status,
            side=Side.BRIDE,
            category_id=category_id,
            submitted_at=datetime.now(UTC),
        )


@pytest.mark.parametrize(
    "action, expected_status",
    [("APPROVE", "APPROVED"), ("REJECT", "REJECTED")],
)
async def test_approve_rsvp(client_factory, action, expected_status):
    memory = {}
    rsvp_id, category_id = uuid4(), uuid4()
    write_model = InMemoryApproveRSVPWriteModel(memory)
    overrides = {
        get_approve_rsvp_write_model: lambda: write_model,
        get_current_couple: lambda: COUPLE,
    }

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_APPROVE_RSVP_URL,
            json={"rsvpId": str(rsvp_id), "action": action, "categoryId": str(category_id)},
        )

    assert response.status_code == 200
    assert response.json() == {
        "message": "RSVP status updated successfully.",
        "status": expected_status,
    }
    assert memory[rsvp_id] == {
        "action": ApprovalAction(action),
        "category_id": category_id,
        "couple_id": COUPLE.uuid,
    }


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ValidationError("A category must be assigned to approve this RSVP"), 400),
        (InvalidTransitionError("APPROVED"), 409),
        (CapacityExceededError("Bride's Family", 0, 2), 409),
    ],
)
async def test_approve_rsvp_domain_errors(client_factory, error, status_code):
    write_model = InMemoryApproveRSVPWriteModel({}, error=error)
    overrides = {
        get_approve_rsvp_write_model: lambda: write_model,
        get_current_couple: lambda: COUPLE,
    }

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_APPROVE_RSVP_URL, json={"rsvpId": str(uuid4()), "action": "APPROVE"}
        )

    assert response.status_code == status_code
    assert response.json() == {"detail": error.message}


async def test_approve_rsvp_unknown_action(client_factory):
    overrides = {
        get_approve_rsvp_write_model: lambda: InMemoryApproveRSVPWriteModel({}),
        get_current_couple: lambda: COUPLE,
    }

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_APPROVE_RSVP_URL, json={"rsvpId": str(uuid4()), "action": "MAYBE"}
        )

    assert response.status_code == 422


async def test_approve_rsvp_requires_auth(client_factory):
    memory = {}
    overrides = {get_approve_rsvp_write_model: lambda: InMemoryApproveRSVPWriteModel(memory)}

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_APPROVE_RSVP_URL, json={"rsvpId": str(uuid4()), "action": "REJECT"}
        )

    assert response.status_code == 401
    assert memory == {}


async def test_approve_rsvp_with_token(client_factory, bride, auth_headers):
    memory = {}
    overrides = {get_approve_rsvp_write_model: lambda: InMemoryApproveRSVPWriteModel(memory)}

    async with client_factory(overrides) as client:
        response = await client.post(
            ADMIN_APPROVE_RSVP_URL,
            json={"rsvpId": str(uuid4()), "action": "REJECT"},
            headers=auth_headers(bride),
        )

    assert response.status_code == 200
    assert [call["couple_id"] for call in memory.values()] == [bride.uuid]


async def test_approve_into_other_couples_category(client, bride, groom, auth_headers):
    category = await SqlCategoryRegistry().create_category(
        name="Bride's Family", side=Side.BRIDE, max_guests=10, couple_id=bride.uuid
    )
    rsvp = await SqlSubmitRSVPWriteModel().submit_rsvp(
        "Ada", "ada@example.com", "0801", 2, selected_side=Side.GROOM
    )

    response = await client.post(
        ADMIN_APPROVE_RSVP_URL,
        json={"rsvpId": str(rsvp.uuid), "action": "APPROVE", "categoryId": str(category.uuid)},
        headers=auth_headers(groom),
    )

    assert response.status_code == 404
    assert await SqlCategoryRegistry().approved_guest_aggregate(category.uuid) == 0
