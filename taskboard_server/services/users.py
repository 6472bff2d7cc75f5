# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Registration and login."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_server.auth import create_access_token, hash_password, verify_password
from taskboard_server.errors import BadCredentials, Conflict, MissingFields, NotFound, NotVerified, Unverified
from taskboard_server.models import User
from taskboard_server.services.verification import (
    consume_code,
    email_registered,
    get_active_code,
    normalize_email,
)

logger = logging.getLogger(__name__)


async def register(
    db: AsyncSession,
    name: str | None,
    email: str | None,
    password: str | None,
) -> User:
    """Create a verified user. Requires an unexpired verification code for the email."""
    if not name or not email or not password:
        raise MissingFields()
    email = normalize_email(email)
    if await email_registered(db, email):
        raise Conflict()
    if await get_active_code(db, email) is None:
        raise NotVerified()
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        is_verified=True,
    )
    db.add(user)
    await consume_code(db, email)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, email)
    return user


async def login(db: AsyncSession, email: str, password: str) -> str:
    """Check credentials and return a signed session token."""
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFound()
    if not user.is_verified:
        raise Unverified()
    if not verify_password(password, user.password_hash):
        raise BadCredentials()
    return create_access_token(
        {"sub": str(user.id), "userId": user.id, "name": user.name, "email": user.email}
    )
