import logging
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gameportal.exceptions import ConflictError
from gameportal.models import Page
from gameportal.schemas import PageCreate, PageUpdate

logger = logging.getLogger(__name__)


async def get_page(session: AsyncSession, page_id: str) -> Optional[Page]:
    """Get page by ID."""
    return await session.get(Page, page_id)


async def get_page_by_slug(
    session: AsyncSession,
    slug: str,
    published_only: bool = True,
) -> Optional[Page]:
    """Get page by slug."""
    query = select(Page).where(Page.slug == slug)
    if published_only:
        query = query.where(Page.publish_status == True)
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def list_pages(session: AsyncSession, published_only: bool = True) -> List[Page]:
    query = select(Page).order_by(Page.title)
    if published_only:
        query = query.where(Page.publish_status == True)
    result = await session.execute(query)
    return list(result.scalars().all())


async def _ensure_slug_free(session: AsyncSession, slug: str, page_id: Optional[str] = None) -> None:
    existing = await get_page_by_slug(session, slug, published_only=False)
    if existing and existing.id != page_id:
        raise ConflictError(f"Page with slug '{slug}' already exists")


async def create_page(session: AsyncSession, page_data: PageCreate) -> Page:
    """Create a page. Raises ConflictError if the slug is taken."""
    await _ensure_slug_free(session, page_data.slug)

    page = Page(**page_data.model_dump())
    session.add(page)
    await session.flush()
    logger.info("Page created: id=%s slug=%s", page.id, page.slug)
    return page


async def update_page(session: AsyncSession, page_id: str, page_update: PageUpdate) -> Optional[Page]:
    """Partially update a page. Raises ConflictError if the new slug is taken."""
    page = await get_page(session, page_id)
    if not page:
        return None

    update_data = page_update.model_dump(exclude_unset=True)
    if update_data.get("slug") and update_data["slug"] != page.slug:
        await _ensure_slug_free(session, update_data["slug"], page_id)

    for field, value in update_data.items():
        if value is None:
            continue
        setattr(page, field, value)

    await session.flush()
    return page


async def delete_page(session: AsyncSession, page_id: str) -> bool:
    page = await get_page(session, page_id)
    if not page:
        return False
    await session.delete(page)
    await session.flush()
    logger.info("Page deleted: id=%s", page_id)
    return True
