from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from gameportal.auth import require_admin
from gameportal.database import get_session
from gameportal.schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from gameportal.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryResponse])
async def list_categories(session: AsyncSession = Depends(get_session)):
    """List all categories."""
    return await category_service.list_categories(session)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get category by ID."""
    category = await category_service.get_category(session, category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    return category


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_category(
    category_data: CategoryCreate,
    session: AsyncSession = Depends(get_session)
):
    """Create a category (admin only)."""
    return await category_service.create_category(session, category_data)


@router.patch("/{category_id}", response_model=CategoryResponse, dependencies=[Depends(require_admin)])
async def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    session: AsyncSession = Depends(get_session)
):
    """Update a category (admin only)."""
    category = await category_service.update_category(session, category_id, category_update)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_category(
    category_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Delete a category (admin only)."""
    if not await category_service.delete_category(session, category_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
