"""
Admin bearer-token guard.

Token checks go through the ``TokenValidator`` capability. Routes never reach
into the admins table themselves; they depend on ``require_admin``, which asks
whatever validator ``get_token_validator`` provides.
"""

import hmac
import logging
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from gameportal.database import get_session
from gameportal.models import Admin
from gameportal.services import admin_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class TokenValidator(ABC):
    """Decides whether a presented token is the live token of a subject."""

    @abstractmethod
    async def is_valid(self, subject_id: str, token: str) -> bool:
        pass

    @abstractmethod
    async def revoke(self, subject_id: str) -> None:
        """Invalidate the subject's live token, if any."""
        pass


class DatabaseTokenValidator(TokenValidator):
    """Validates against the SHA-256 stored in ``admins.current_token_hash``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def is_valid(self, subject_id: str, token: str) -> bool:
        admin = await admin_service.get_admin(self._session, subject_id)
        if not admin or not admin.current_token_hash:
            return False
        return hmac.compare_digest(admin.current_token_hash, admin_service.hash_token(token))

    async def revoke(self, subject_id: str) -> None:
        admin = await admin_service.get_admin(self._session, subject_id)
        if admin:
            admin.current_token_hash = None
            await self._session.flush()
            logger.info("Admin token revoked: id=%s", subject_id)


def get_token_validator(session: AsyncSession = Depends(get_session)) -> TokenValidator:
    return DatabaseTokenValidator(session)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    validator: TokenValidator = Depends(get_token_validator),
    session: AsyncSession = Depends(get_session),
) -> Admin:
    """Resolve the calling admin or fail with 401."""
    if credentials is None:
        # HTTPBearer yields None both for a missing header and a non-Bearer scheme
        if request.headers.get("Authorization"):
            raise _unauthorized("Invalid token format")
        raise _unauthorized("No token provided")

    token = credentials.credentials
    parts = admin_service.split_token(token)
    if parts is None:
        raise _unauthorized("Invalid token format")
    admin_id, _ = parts

    if not await validator.is_valid(admin_id, token):
        logger.warning("Rejected admin token for subject %s", admin_id)
        raise _unauthorized("Invalid token")

    admin = await admin_service.get_admin(session, admin_id)
    if admin is None:
        raise _unauthorized("Invalid token")
    return admin
