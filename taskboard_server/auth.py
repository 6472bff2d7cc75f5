# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Authentication: JWT and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from taskboard_server.config import settings
from taskboard_server.errors import ConfigError, Unauthorized

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password for storage (salted bcrypt)."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against its hash."""
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_access_token(
    data: dict[str, Any],
    secret: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT. Raises ConfigError when no signing secret is configured."""
    secret = secret or settings.jwt_secret
    if not secret:
        raise ConfigError("JWT_SECRET is not configured")
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str | None, secret: str | None = None) -> dict[str, Any]:
    """Decode and validate a JWT. Raises Unauthorized if missing, forged or expired."""
    if not token:
        raise Unauthorized("Token not provided")
    secret = secret or settings.jwt_secret
    if not secret:
        raise Unauthorized()
    try:
        return jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise Unauthorized() from e


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Claims of the Bearer token on the request. Raises 401 if absent or invalid."""
    return decode_token(credentials.credentials if credentials else None)


async def get_current_user_id(
    claims: dict[str, Any] = Depends(get_current_claims),
) -> Any:
    """Raw userId claim; task routes validate it is an integer."""
    return claims.get("userId")
