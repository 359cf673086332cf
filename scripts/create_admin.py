#!/usr/bin/env python3
"""
Create an admin account (or reuse an existing one) and print a fresh bearer token.

Any token previously issued to that admin stops working.

Usage:
    python scripts/create_admin.py [username]

The username defaults to $ADMIN_USERNAME, then "admin".
"""

import asyncio
import os
import sys

from gameportal.database import async_session_maker, init_db, close_db
from gameportal.services import admin_service


async def create_admin(username: str) -> str:
    await init_db()
    try:
        async with async_session_maker() as session:
            admin, is_new = await admin_service.get_or_create_admin(session, username)
            token = await admin_service.rotate_token(session, admin)
            await session.commit()
    finally:
        await close_db()

    print(f"Admin '{username}' {'created' if is_new else 'already exists, token rotated'}")
    return token


def main() -> None:
    username = sys.argv[1] if len(sys.argv) > 1 else os.getenv("ADMIN_USERNAME", "admin")
    token = asyncio.run(create_admin(username))
    print(f"Bearer token: {token}")


if __name__ == "__main__":
    main()
