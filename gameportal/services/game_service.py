import logging
from typing import Optional, List, Sequence

from sqlalchemy import select, update, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gameportal.models import Game, GameCategory, Category, utcnow
from gameportal.schemas import GameCreate, GameUpdate, GameSortField, SortOrder

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    GameSortField.TITLE: Game.title,
    GameSortField.RATING: Game.rating,
    GameSortField.PUBLISH_STATUS: Game.publish_status,
    GameSortField.IS_TRENDING: Game.is_trending,
    GameSortField.CREATED_AT: Game.created_at,
    GameSortField.PUBLISHED_AT: Game.published_at,
}

_NOT_NULLABLE = {"title", "description", "rating", "publish_status", "is_trending"}


def _with_categories(query):
    return query.options(
        selectinload(Game.game_categories).selectinload(GameCategory.category)
    ).execution_options(populate_existing=True)


def _search_filter(search: str):
    pattern = f"%{search}%"
    return or_(Game.title.ilike(pattern), Game.description.ilike(pattern))


async def _check_categories(session: AsyncSession, category_ids: Sequence[str]) -> List[str]:
    """Return the de-duplicated ids, raising ValueError if any is unknown."""
    unique_ids = list(dict.fromkeys(category_ids))
    if not unique_ids:
        return []
    result = await session.execute(
        select(Category.id).where(Category.id.in_(unique_ids))
    )
    found = {row[0] for row in result.all()}
    missing = [c for c in unique_ids if c not in found]
    if missing:
        raise ValueError(f"Unknown category ids: {', '.join(missing)}")
    return unique_ids


async def get_game_by_id(session: AsyncSession, game_id: str) -> Optional[Game]:
    """Get game by ID with its categories."""
    result = await session.execute(
        _with_categories(select(Game).where(Game.id == game_id))
    )
    return result.scalar_one_or_none()


async def game_exists(session: AsyncSession, game_id: str) -> bool:
    """Existence check used by the reaction ledger."""
    result = await session.scalar(
        select(func.count(Game.id)).where(Game.id == game_id)
    )
    return bool(result)


async def create_game(session: AsyncSession, game_data: GameCreate) -> Game:
    """Create a game and its category links in the caller's transaction.

    Raises ValueError before writing anything if a category id is unknown.
    """
    category_ids = await _check_categories(session, game_data.category_ids)

    game = Game(**game_data.model_dump(exclude={"category_ids"}))
    if game.publish_status:
        game.published_at = utcnow()
    game.game_categories = [GameCategory(category_id=c) for c in category_ids]
    session.add(game)
    await session.flush()

    logger.info("Game created: id=%s title=%r categories=%d", game.id, game.title, len(category_ids))
    return await get_game_by_id(session, game.id)


async def list_games(
    session: AsyncSession,
    search: Optional[str] = None,
    published_only: bool = True,
) -> List[Game]:
    """List games, newest first."""
    query = select(Game)
    if published_only:
        query = query.where(Game.publish_status == True)
    if search:
        query = query.where(_search_filter(search))
    query = query.order_by(Game.created_at.desc())

    result = await session.execute(_with_categories(query))
    return list(result.scalars().all())


async def list_games_admin(
    session: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: GameSortField = GameSortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
) -> tuple[List[Game], int]:
    """Paginated listing of every game, published or not. Returns (games, total)."""
    query = select(Game)
    count_query = select(func.count(Game.id))
    if search:
        query = query.where(_search_filter(search))
        count_query = count_query.where(_search_filter(search))

    column = _SORT_COLUMNS.get(sort_by, Game.created_at)
    ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
    query = query.order_by(ordering, Game.id).offset((page - 1) * limit).limit(limit)

    result = await session.execute(_with_categories(query))
    total = await session.scalar(count_query)
    return list(result.scalars().all()), total or 0


async def list_new_games(session: AsyncSession, limit: int = 10) -> List[Game]:
    """Most recently published games."""
    result = await session.execute(
        _with_categories(
            select(Game)
            .where(Game.publish_status == True)
            .order_by(Game.published_at.desc(), Game.created_at.desc())
            .limit(limit)
        )
    )
    return list(result.scalars().all())


async def list_trending_games(session: AsyncSession, limit: int = 10) -> List[Game]:
    """Published games flagged as trending."""
    result = await session.execute(
        _with_categories(
            select(Game)
            .where(Game.publish_status == True, Game.is_trending == True)
            .order_by(Game.play_count.desc(), Game.created_at.desc())
            .limit(limit)
        )
    )
    return list(result.scalars().all())


async def update_game(session: AsyncSession, game_id: str, game_update: GameUpdate) -> Optional[Game]:
    """Partially update a game. ``category_ids`` replaces the whole link set."""
    game = await get_game_by_id(session, game_id)
    if not game:
        return None

    update_data = game_update.model_dump(exclude_unset=True)
    category_ids = update_data.pop("category_ids", None)

    if category_ids is not None:
        category_ids = await _check_categories(session, category_ids)
        # Keep surviving links so the (game, category) index never sees a duplicate
        current = {gc.category_id: gc for gc in game.game_categories}
        game.game_categories = [current.get(c) or GameCategory(category_id=c) for c in category_ids]

    for field, value in update_data.items():
        if value is None and field in _NOT_NULLABLE:
            continue
        setattr(game, field, value)

    if game.publish_status and game.published_at is None:
        game.published_at = utcnow()

    await session.flush()
    logger.info("Game updated: id=%s fields=%s", game_id, sorted(game_update.model_fields_set))
    return await get_game_by_id(session, game_id)


async def delete_game(session: AsyncSession, game_id: str) -> bool:
    """Delete a game; category links and reactions go with it."""
    game = await session.get(Game, game_id)
    if not game:
        return False
    await session.delete(game)
    await session.flush()
    logger.info("Game deleted: id=%s", game_id)
    return True


async def increment_play_count(session: AsyncSession, game_id: str) -> Optional[int]:
    """Atomically bump the play counter. Returns the new value, or None if missing."""
    result = await session.execute(
        update(Game)
        .where(Game.id == game_id)
        .values(play_count=Game.play_count + 1)
        .returning(Game.play_count)
        .execution_options(synchronize_session=False)
    )
    return result.scalar_one_or_none()
