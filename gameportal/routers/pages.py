from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from gameportal.auth import require_admin
from gameportal.database import get_session
from gameportal.exceptions import ConflictError
from gameportal.schemas import PageCreate, PageUpdate, PageResponse
from gameportal.services import page_service

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get("/", response_model=List[PageResponse])
async def list_pages(session: AsyncSession = Depends(get_session)):
    """List published pages."""
    return await page_service.list_pages(session, published_only=True)


@router.get("/admin/list", response_model=List[PageResponse], dependencies=[Depends(require_admin)])
async def list_pages_admin(session: AsyncSession = Depends(get_session)):
    """List every page, published or not (admin only)."""
    return await page_service.list_pages(session, published_only=False)


@router.get("/slug/{slug}", response_model=PageResponse)
async def get_page_by_slug(
    slug: str,
    session: AsyncSession = Depends(get_session)
):
    """Get a published page by slug."""
    page = await page_service.get_page_by_slug(session, slug)
    if not page:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Page not found"
        )
    return page


@router.get("/{page_id}", response_model=PageResponse)
async def get_page(
    page_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get page by ID."""
    page = await page_service.get_page(session, page_id)
    if not page:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Page not found"
        )
    return page


@router.post(
    "/",
    response_model=PageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_page(
    page_data: PageCreate,
    session: AsyncSession = Depends(get_session)
):
    """Create a page (admin only)."""
    try:
        return await page_service.create_page(session, page_data)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.patch("/{page_id}", response_model=PageResponse, dependencies=[Depends(require_admin)])
async def update_page(
    page_id: str,
    page_update: PageUpdate,
    session: AsyncSession = Depends(get_session)
):
    """Update a page (admin only)."""
    try:
        page = await page_service.update_page(session, page_id, page_update)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    if not page:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Page not found"
        )
    return page


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_page(
    page_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Delete a page (admin only)."""
    if not await page_service.delete_page(session, page_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Page not found"
        )
