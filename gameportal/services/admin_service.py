"""
Admin accounts and their bearer tokens.

A bearer token has the form ``<admin_id>.<secret>``. Only the SHA-256 of the
whole token is stored; each admin has at most one live token at a time.
"""

import hashlib
import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gameportal.models import Admin

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = "."


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def split_token(token: str) -> Optional[tuple[str, str]]:
    """Return (admin_id, secret), or None when the token is malformed."""
    admin_id, sep, secret = token.partition(TOKEN_SEPARATOR)
    if not sep or not admin_id or not secret:
        return None
    return admin_id, secret


async def get_admin(session: AsyncSession, admin_id: str) -> Optional[Admin]:
    return await session.get(Admin, admin_id)


async def get_admin_by_username(session: AsyncSession, username: str) -> Optional[Admin]:
    result = await session.execute(
        select(Admin).where(Admin.username == username)
    )
    return result.scalar_one_or_none()


async def get_or_create_admin(session: AsyncSession, username: str) -> tuple[Admin, bool]:
    """Get existing admin or create new one. Returns (admin, is_new)."""
    admin = await get_admin_by_username(session, username)
    if admin:
        return admin, False
    admin = Admin(username=username)
    session.add(admin)
    await session.flush()
    logger.info("Admin created: id=%s username=%s", admin.id, username)
    return admin, True


async def rotate_token(session: AsyncSession, admin: Admin) -> str:
    """Replace the admin's live token and return the new plaintext token."""
    token = f"{admin.id}{TOKEN_SEPARATOR}{secrets.token_urlsafe(32)}"
    admin.current_token_hash = hash_token(token)
    await session.flush()
    logger.info("Admin token rotated: id=%s", admin.id)
    return token

