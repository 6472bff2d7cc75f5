# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Email verification codes: issue, check, consume and purge."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_server.config import settings
from taskboard_server.errors import Conflict, InvalidCode
from taskboard_server.models import User, VerificationCode
from taskboard_server.services.email import send_verification_email

logger = logging.getLogger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


def generate_code() -> int:
    """Uniformly random 6-digit code in [100000, 999999]."""
    return CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def parse_code(value: Any) -> int | None:
    """Numeric value of a submitted code, or None if it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


async def email_registered(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User.id).where(User.email == normalize_email(email)))
    return result.first() is not None


async def get_active_code(db: AsyncSession, email: str) -> VerificationCode | None:
    """Unexpired verification entry for the email, if any."""
    result = await db.execute(
        select(VerificationCode).where(
            VerificationCode.email == normalize_email(email),
            VerificationCode.expires_at > datetime.now(timezone.utc),
        )
    )
    return result.scalar_one_or_none()


async def _upsert_code(db: AsyncSession, email: str, code: int, expires_at: datetime) -> None:
    """Insert or overwrite the entry for an email in one statement (last write wins)."""
    insert = pg_insert if db.get_bind().dialect.name == "postgresql" else sqlite_insert
    stmt = insert(VerificationCode).values(email=email, code=code, expires_at=expires_at)
    stmt = stmt.on_conflict_do_update(
        index_elements=["email"],
        set_={"code": stmt.excluded.code, "expires_at": stmt.excluded.expires_at},
    )
    await db.execute(stmt)


async def request_verification(db: AsyncSession, email: str) -> int:
    """
    Store a fresh code for the email and mail it.

    Replaces any previous code for the same address. The code is mailed to
    the address as given; the entry is keyed by its lowercased form. It is
    committed before delivery, so it stays valid even if sending fails.
    """
    address = email.strip()
    key = normalize_email(address)
    if await email_registered(db, key):
        raise Conflict()
    code = generate_code()
    await _upsert_code(
        db,
        key,
        code,
        datetime.now(timezone.utc) + timedelta(minutes=settings.verification_code_ttl_minutes),
    )
    await db.commit()
    await send_verification_email(address, code)
    logger.info("Verification code sent to %s", address)
    return code


async def validate_code(db: AsyncSession, email: str | None, submitted: Any) -> None:
    """Raise InvalidCode unless an unexpired entry with the same numeric code exists."""
    code = parse_code(submitted)
    if not email or code is None:
        raise InvalidCode()
    entry = await get_active_code(db, email)
    if entry is None or entry.code != code:
        raise InvalidCode()


async def consume_code(db: AsyncSession, email: str) -> None:
    """Delete the verification entry for the email."""
    await db.execute(
        delete(VerificationCode).where(VerificationCode.email == normalize_email(email))
    )


async def purge_expired_codes(db: AsyncSession) -> int:
    """Delete all expired verification entries. Returns the number removed."""
    result = await db.execute(
        delete(VerificationCode).where(VerificationCode.expires_at <= datetime.now(timezone.utc))
    )
    await db.commit()
    return result.rowcount or 0
