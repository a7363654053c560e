from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from src.auth.dependencies import get_current_couple
from src.rsvps.dtos import CoupleDTO, Side
from src.rsvps.features.manage_categories.dtos import (
    CategoryResponse,
    CreateCategoryRequest,
    UpdateCategoryRequest,
)
from src.rsvps.repository.category_registry import CategoryRegistry, SqlCategoryRegistry
from src.rsvps.urls import ADMIN_CATEGORIES_URL, ADMIN_CATEGORY_URL, ADMIN_DEFAULT_CATEGORY_URL

router = APIRouter()


def get_category_registry() -> CategoryRegistry:
    """Dependency to get category registry instance."""
    return SqlCategoryRegistry()


@router.get(ADMIN_CATEGORIES_URL, response_model=list[CategoryResponse])
async def list_categories(
    couple: CoupleDTO = Depends(get_current_couple),
    registry: CategoryRegistry = Depends(get_category_registry),
) -> list[CategoryResponse]:
    """List the caller's categories with their approved and remaining guest counts."""
    capacities = await registry.list_categories(couple.uuid)
    return [CategoryResponse.from_capacity(capacity) for capacity in capacities]


@router.post(
    ADMIN_CATEGORIES_URL,
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    request: CreateCategoryRequest,
    couple: CoupleDTO = Depends(get_current_couple),
    registry: CategoryRegistry = Depends(get_category_registry),
) -> CategoryResponse:
    """
    Create a category owned by the caller.

    An invitation token is generated unless one is given.
    """
    category = await registry.create_category(
        name=request.name,
        side=request.side,
        max_guests=request.max_guests,
        couple_id=couple.uuid,
        invitation_token=request.invitation_token,
        is_default=request.is_default,
    )
    return CategoryResponse.from_dto(category, approved_guests=0)


@router.get(ADMIN_DEFAULT_CATEGORY_URL, response_model=CategoryResponse)
async def get_default_category(
    side: Side,
    couple: CoupleDTO = Depends(get_current_couple),
    registry: CategoryRegistry = Depends(get_category_registry),
) -> CategoryResponse:
    """Get the catch-all category of a side."""
    category = await registry.resolve_default_for_side(side)
    approved = await registry.approved_guest_aggregate(category.uuid)
    return CategoryResponse.from_dto(category, approved_guests=approved)


@router.patch(ADMIN_CATEGORY_URL, response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    request: UpdateCategoryRequest,
    couple: CoupleDTO = Depends(get_current_couple),
    registry: CategoryRegistry = Depends(get_category_registry),
) -> CategoryResponse:
    """Update one of the caller's categories. Omitted fields are left as they are."""
    category = await registry.update_category(
        category_id,
        couple.uuid,
        **request.model_dump(exclude_unset=True, exclude_none=True),
    )
    approved = await registry.approved_guest_aggregate(category.uuid)
    return CategoryResponse.from_dto(category, approved_guests=approved)


@router.delete(ADMIN_CATEGORY_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: UUID,
    couple: CoupleDTO = Depends(get_current_couple),
    registry: CategoryRegistry = Depends(get_category_registry),
) -> Response:
    """Delete one of the caller's categories. Fails with 409 while RSVPs reference it."""
    await registry.delete_category(category_id, couple.uuid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
