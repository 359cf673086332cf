"""Game reaction repository."""
from typing import Dict, Optional
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from gameportal.models import GameReaction, ReactionType


class ReactionRepository:
    """Row-level access to ``game_reactions``. Never commits."""

    @staticmethod
    async def get(db: AsyncSession, game_id: str, user_id: str) -> Optional[GameReaction]:
        """Get the reaction for a (user, game) pair."""
        result = await db.execute(
            select(GameReaction).where(
                GameReaction.game_id == game_id,
                GameReaction.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def insert(
        db: AsyncSession,
        game_id: str,
        user_id: str,
        reaction_type: ReactionType,
    ) -> GameReaction:
        """Insert a new reaction and flush so the unique constraint fires here."""
        reaction = GameReaction(
            game_id=game_id,
            user_id=user_id,
            reaction_type=reaction_type,
        )
        db.add(reaction)
        await db.flush()
        return reaction

    @staticmethod
    async def delete(db: AsyncSession, game_id: str, user_id: str) -> bool:
        """Delete the pair's reaction. Returns True if a row was removed."""
        result = await db.execute(
            delete(GameReaction).where(
                GameReaction.game_id == game_id,
                GameReaction.user_id == user_id,
            )
        )
        return result.rowcount > 0

    @staticmethod
    async def count_by_type(db: AsyncSession, game_id: str) -> Dict[ReactionType, int]:
        """Count reactions for a game grouped by kind. Missing kinds count as 0."""
        result = await db.execute(
            select(GameReaction.reaction_type, func.count(GameReaction.id))
            .where(GameReaction.game_id == game_id)
            .group_by(GameReaction.reaction_type)
        )
        counts = {kind: 0 for kind in ReactionType}
        for reaction_type, count in result.all():
            counts[ReactionType(reaction_type)] = count
        return counts
