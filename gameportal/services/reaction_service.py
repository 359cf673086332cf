"""
Reaction ledger: per-(user, game) like/dislike with at most one live reaction.

State per pair is NONE, LIKED or DISLIKED:

    NONE     --like/dislike-->  LIKED/DISLIKED   insert
    LIKED    --like-->          LIKED            no-op
    LIKED    --dislike-->       DISLIKED         update in place
    DISLIKED --like-->          LIKED            update in place
    any      --remove-->        NONE             delete (no-op from NONE)

Inserts run inside a SAVEPOINT. When a concurrent request wins the insert
race, the unique constraint rejects ours; the savepoint is rolled back and
the pair is re-read and toggled like any other existing reaction.
"""

import logging
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gameportal.config import get_settings
from gameportal.exceptions import ResourceNotFoundError
from gameportal.models import ReactionType, utcnow
from gameportal.repositories.reaction_repository import ReactionRepository
from gameportal.schemas import ReactionOutcome, ReactionResponse, ReactionStatsResponse
from gameportal.services import game_service

logger = logging.getLogger(__name__)
settings = get_settings()

ExistsCheck = Callable[[AsyncSession, str], Awaitable[bool]]

_MESSAGES = {
    (ReactionType.LIKE, ReactionOutcome.CREATED): "Game liked successfully",
    (ReactionType.LIKE, ReactionOutcome.UNCHANGED): "Game already liked",
    (ReactionType.LIKE, ReactionOutcome.UPDATED): "Reaction updated to like",
    (ReactionType.DISLIKE, ReactionOutcome.CREATED): "Game disliked successfully",
    (ReactionType.DISLIKE, ReactionOutcome.UNCHANGED): "Game already disliked",
    (ReactionType.DISLIKE, ReactionOutcome.UPDATED): "Reaction updated to dislike",
}


class ReactionLedger:
    """Like/dislike store for one kind of resource.

    Args:
        exists: async ``(session, resource_id) -> bool`` used before every
            operation; a False result raises ResourceNotFoundError.
        resource_name: used in NotFound messages.
        insert_attempts: how many times to retry after losing an insert race.
    """

    def __init__(
        self,
        exists: ExistsCheck,
        resource_name: str = "Game",
        insert_attempts: int = 3,
    ) -> None:
        self._exists = exists
        self._resource_name = resource_name
        self._insert_attempts = max(1, insert_attempts)

    async def like(self, session: AsyncSession, resource_id: str, user_id: str) -> ReactionResponse:
        return await self._react(session, resource_id, user_id, ReactionType.LIKE)

    async def dislike(self, session: AsyncSession, resource_id: str, user_id: str) -> ReactionResponse:
        return await self._react(session, resource_id, user_id, ReactionType.DISLIKE)

    async def remove_reaction(self, session: AsyncSession, resource_id: str, user_id: str) -> ReactionResponse:
        """Delete the pair's reaction. Removing nothing is not an error."""
        await self._require(session, resource_id)

        if await ReactionRepository.delete(session, resource_id, user_id):
            logger.debug("Reaction removed: resource=%s user=%s", resource_id, user_id)
            return ReactionResponse(
                message="Reaction removed successfully",
                outcome=ReactionOutcome.REMOVED,
            )
        return ReactionResponse(
            message="No reaction to remove",
            outcome=ReactionOutcome.NOTHING_TO_REMOVE,
        )

    async def get_user_reaction(
        self, session: AsyncSession, resource_id: str, user_id: str
    ) -> Optional[ReactionType]:
        reaction = await ReactionRepository.get(session, resource_id, user_id)
        return reaction.reaction_type if reaction else None

    async def get_aggregate(
        self,
        session: AsyncSession,
        resource_id: str,
        user_id: Optional[str] = None,
    ) -> ReactionStatsResponse:
        """Like/dislike counts plus the caller's own reaction, if a user is given."""
        await self._require(session, resource_id)

        counts = await ReactionRepository.count_by_type(session, resource_id)
        user_reaction = None
        if user_id:
            user_reaction = await self.get_user_reaction(session, resource_id, user_id)

        return ReactionStatsResponse(
            like_count=counts[ReactionType.LIKE],
            dislike_count=counts[ReactionType.DISLIKE],
            user_reaction=user_reaction,
        )

    async def _require(self, session: AsyncSession, resource_id: str) -> None:
        if not await self._exists(session, resource_id):
            raise ResourceNotFoundError(self._resource_name, resource_id)

    async def _react(
        self,
        session: AsyncSession,
        resource_id: str,
        user_id: str,
        kind: ReactionType,
    ) -> ReactionResponse:
        await self._require(session, resource_id)

        last_error: Optional[IntegrityError] = None
        for attempt in range(1, self._insert_attempts + 1):
            existing = await ReactionRepository.get(session, resource_id, user_id)

            if existing is None:
                try:
                    async with session.begin_nested():
                        await ReactionRepository.insert(session, resource_id, user_id, kind)
                except IntegrityError as e:
                    # Another request inserted the pair first
                    last_error = e
                    logger.info(
                        "Reaction insert conflict, reconciling: resource=%s user=%s attempt=%d",
                        resource_id, user_id, attempt,
                    )
                    continue
                return self._result(kind, ReactionOutcome.CREATED)

            if existing.reaction_type == kind:
                return self._result(kind, ReactionOutcome.UNCHANGED)

            existing.reaction_type = kind
            existing.updated_at = utcnow()
            await session.flush()
            return self._result(kind, ReactionOutcome.UPDATED)

        raise last_error

    @staticmethod
    def _result(kind: ReactionType, outcome: ReactionOutcome) -> ReactionResponse:
        logger.debug("Reaction %s: %s", kind.value, outcome.value)
        return ReactionResponse(
            message=_MESSAGES[(kind, outcome)],
            outcome=outcome,
            reaction_type=kind,
        )


game_reactions = ReactionLedger(
    game_service.game_exists,
    resource_name="Game",
    insert_attempts=settings.reaction_insert_attempts,
)
