# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Service-level exceptions.

Services raise these; the handlers registered in ``main`` turn them into
JSON responses with the matching status code.
"""

from typing import Any

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"
    # When False, clients only see default_message and the detail is logged
    expose: bool = True
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Body for the API response."""
        message = self.message if self.expose else self.default_message
        return {"detail": message, "error": self.code}


# 400
class BadRequest(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class MissingFields(BadRequest):
    default_message = "Please fill in all required fields"


class NotVerified(BadRequest):
    default_message = "Email not verified. Please validate your email first."


class InvalidCode(BadRequest):
    default_message = "Invalid or expired verification code"


# 401
class Unauthorized(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"
    headers = {"WWW-Authenticate": "Bearer"}


class NotFound(Unauthorized):
    default_message = "User not found"


class Unverified(Unauthorized):
    default_message = "Email not verified"


class BadCredentials(Unauthorized):
    default_message = "Invalid password"


# 409
class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already registered"


# 500
class DeliveryError(ServiceError):
    default_message = "Failed to send verification code"
    expose = False


class ConfigError(ServiceError):
    default_message = "Login failed"
    expose = False
