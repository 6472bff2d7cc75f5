# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic schemas for API request/response. JSON field names are camelCase."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, StrictFloat, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Message(BaseModel):
    message: str


# Users
class SendCodeRequest(CamelModel):
    email: EmailStr | None = None


class ValidateCodeRequest(CamelModel):
    email: str | None = None
    verification_code: StrictStr | StrictInt | StrictFloat | None = None


class UserCreate(CamelModel):
    name: str | None = None
    email: EmailStr | None = None
    password: str | None = None


class UserLogin(CamelModel):
    email: str
    password: str


class Token(BaseModel):
    token: str


class UserResponse(CamelModel):
    """Public view of a user. Never carries the password hash."""

    id: int
    name: str
    email: str
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class TokenStatus(CamelModel):
    valid: bool
    user_id: int | str | None = None
    name: str | None = None
    email: str | None = None


# Tasks
class TaskCreate(CamelModel):
    title: str | None = None
    description: str | None = None
    deadline: str | None = None


class TaskResponse(CamelModel):
    id: int
    title: str
    description: str
    deadline: datetime | None = None
    user_id: int

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)
