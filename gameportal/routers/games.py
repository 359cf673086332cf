from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from gameportal.auth import require_admin
from gameportal.config import get_settings
from gameportal.database import get_session
from gameportal.schemas import (
    GameCreate, GameUpdate, GameResponse, GameListResponse,
    GameSortField, SortOrder, PlayCountResponse,
)
from gameportal.services import game_service

router = APIRouter(prefix="/games", tags=["games"])
settings = get_settings()


# ============== Admin ==============

@router.post(
    "/",
    response_model=GameResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_game(
    game_data: GameCreate,
    session: AsyncSession = Depends(get_session)
):
    """Create a new game with its categories (admin only)."""
    try:
        return await game_service.create_game(session, game_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/admin/list", response_model=GameListResponse, dependencies=[Depends(require_admin)])
async def list_games_admin(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.admin_page_size_max),
    sort_by: GameSortField = GameSortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
    session: AsyncSession = Depends(get_session)
):
    """List all games with search, pagination and sorting (admin only)."""
    games, total = await game_service.list_games_admin(
        session, search, page, limit, sort_by, sort_order
    )
    return GameListResponse(data=games, total=total, page=page, limit=limit)


@router.patch("/{game_id}", response_model=GameResponse, dependencies=[Depends(require_admin)])
async def update_game(
    game_id: str,
    game_update: GameUpdate,
    session: AsyncSession = Depends(get_session)
):
    """Update a game (admin only)."""
    try:
        game = await game_service.update_game(session, game_id, game_update)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    if not game:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Game not found"
        )
    return game


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_game(
    game_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Delete a game (admin only)."""
    if not await game_service.delete_game(session, game_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Game not found"
        )


# ============== Public ==============

@router.get("/", response_model=List[GameResponse])
async def list_games(
    search: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """List published games, optionally filtered by a search term."""
    return await game_service.list_games(session, search, published_only=True)


@router.get("/new", response_model=List[GameResponse])
async def get_new_games(session: AsyncSession = Depends(get_session)):
    """Most recently published games."""
    return await game_service.list_new_games(session, settings.new_games_limit)


@router.get("/trending", response_model=List[GameResponse])
async def get_trending_games(session: AsyncSession = Depends(get_session)):
    """Published games flagged as trending."""
    return await game_service.list_trending_games(session, settings.trending_games_limit)


@router.get("/{game_id}", response_model=GameResponse)
async def get_game(
    game_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Get game by ID."""
    game = await game_service.get_game_by_id(session, game_id)
    if not game:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Game not found"
        )
    return game


@router.post("/{game_id}/increment-play-count", response_model=PlayCountResponse)
async def increment_play_count(
    game_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Record one play of a game."""
    play_count = await game_service.increment_play_count(session, game_id)
    if play_count is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Game not found"
        )
    return PlayCountResponse(id=game_id, play_count=play_count)
