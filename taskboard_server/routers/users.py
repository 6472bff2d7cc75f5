# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""User registration, login and token API routes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_server.auth import bearer_scheme, decode_token
from taskboard_server.database import get_db
from taskboard_server.errors import MissingFields, Unauthorized
from taskboard_server.api.schemas import (
    Message,
    RegisterResponse,
    SendCodeRequest,
    Token,
    TokenStatus,
    UserCreate,
    UserLogin,
    UserResponse,
    ValidateCodeRequest,
)
from taskboard_server.services import users, verification

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/send-verification-code", response_model=Message)
async def send_verification_code(
    data: SendCodeRequest,
    db: AsyncSession = Depends(get_db),
) -> Message:
    """Email a 6-digit registration code to an address not yet registered."""
    if not data.email:
        raise MissingFields("Email is required")
    await verification.request_verification(db, data.email)
    return Message(message="Verification code sent to email")


@router.post("/validate-code", response_model=Message)
async def validate_code(
    data: ValidateCodeRequest,
    db: AsyncSession = Depends(get_db),
) -> Message:
    """Check a code without consuming it."""
    await verification.validate_code(db, data.email, data.verification_code)
    return Message(message="Verification code is valid")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    """Create an account for an email holding an unexpired verification code."""
    user = await users.register(db, data.name, data.email, data.password)
    return RegisterResponse(message="User created successfully", user=UserResponse.model_validate(user))


@router.post("/login", response_model=Token)
async def login(
    data: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Token:
    """Authenticate and return JWT."""
    return Token(token=await users.login(db, data.email, data.password))


@router.get("/verify-token", response_model=TokenStatus)
async def verify_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
):
    """Report whether the Bearer token is valid, with the identity it carries."""
    try:
        claims = decode_token(credentials.credentials if credentials else None)
    except Unauthorized as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"valid": False, **e.to_dict()},
            headers=e.headers,
        )
    return TokenStatus(
        valid=True,
        user_id=claims.get("userId"),
        name=claims.get("name"),
        email=claims.get("email"),
    )
