# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Database models."""

from taskboard_server.models.base import Base
from taskboard_server.models.task import Task
from taskboard_server.models.user import User
from taskboard_server.models.verification_code import VerificationCode

__all__ = [
    "Base",
    "Task",
    "User",
    "VerificationCode",
]
