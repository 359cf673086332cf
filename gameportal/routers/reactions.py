"""
Like/dislike endpoints for games.

``user_id`` is taken from the query string as given; it is not tied to any
authenticated session.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from gameportal.database import get_session
from gameportal.exceptions import ResourceNotFoundError
from gameportal.schemas import ReactionResponse, ReactionStatsResponse
from gameportal.services.reaction_service import game_reactions

router = APIRouter(prefix="/games", tags=["reactions"])

UserId = Annotated[str, Query(min_length=1, max_length=255, description="Reacting user's identifier")]


def _not_found(e: ResourceNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{game_id}/like", response_model=ReactionResponse)
async def like_game(
    game_id: str,
    user_id: UserId,
    session: AsyncSession = Depends(get_session)
):
    """Like a game. Repeating the call is a no-op."""
    try:
        return await game_reactions.like(session, game_id, user_id)
    except ResourceNotFoundError as e:
        raise _not_found(e)


@router.post("/{game_id}/dislike", response_model=ReactionResponse)
async def dislike_game(
    game_id: str,
    user_id: UserId,
    session: AsyncSession = Depends(get_session)
):
    """Dislike a game. Repeating the call is a no-op."""
    try:
        return await game_reactions.dislike(session, game_id, user_id)
    except ResourceNotFoundError as e:
        raise _not_found(e)


@router.delete("/{game_id}/reaction", response_model=ReactionResponse)
async def remove_reaction(
    game_id: str,
    user_id: UserId,
    session: AsyncSession = Depends(get_session)
):
    """Remove the user's reaction. Succeeds even if there was none."""
    try:
        return await game_reactions.remove_reaction(session, game_id, user_id)
    except ResourceNotFoundError as e:
        raise _not_found(e)


@router.get("/{game_id}/reactions", response_model=ReactionStatsResponse)
async def get_reaction_stats(
    game_id: str,
    user_id: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """Like/dislike counts, plus the given user's own reaction."""
    try:
        return await game_reactions.get_aggregate(session, game_id, user_id)
    except ResourceNotFoundError as e:
        raise _not_found(e)
