import logging
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gameportal.models import Category
from gameportal.schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


async def get_category(session: AsyncSession, category_id: str) -> Optional[Category]:
    """Get category by ID."""
    return await session.get(Category, category_id)


async def list_categories(session: AsyncSession) -> List[Category]:
    """All categories ordered by name."""
    result = await session.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def create_category(session: AsyncSession, category_data: CategoryCreate) -> Category:
    category = Category(name=category_data.name, icon=category_data.icon)
    session.add(category)
    await session.flush()
    logger.info("Category created: id=%s name=%r", category.id, category.name)
    return category


async def update_category(
    session: AsyncSession,
    category_id: str,
    category_update: CategoryUpdate,
) -> Optional[Category]:
    category = await get_category(session, category_id)
    if not category:
        return None

    for field, value in category_update.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(category, field, value)

    await session.flush()
    return category


async def delete_category(session: AsyncSession, category_id: str) -> bool:
    """Delete a category. Its game links are removed by the FK cascade."""
    category = await get_category(session, category_id)
    if not category:
        return False
    await session.delete(category)
    await session.flush()
    logger.info("Category deleted: id=%s", category_id)
    return True
