# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Password hashing and JWT helpers."""

from datetime import timedelta

import pytest

from taskboard_server.auth import create_access_token, decode_token, hash_password, verify_password
from taskboard_server.errors import ConfigError, Unauthorized


def test_hash_is_salted_and_verifies():
    h1 = hash_password("s3cret")
    h2 = hash_password("s3cret")
    assert h1 != h2
    assert "s3cret" not in h1
    assert verify_password("s3cret", h1)
    assert not verify_password("other", h1)


def test_verify_password_against_garbage_hash():
    assert not verify_password("s3cret", "not-a-bcrypt-hash")


def test_token_round_trip_claims():
    token = create_access_token({"userId": 7, "name": "Ana", "email": "a@b.com"})
    claims = decode_token(token)
    assert claims["userId"] == 7
    assert claims["email"] == "a@b.com"
    assert "exp" in claims


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token({"userId": 7}, secret="someone-else")
    with pytest.raises(Unauthorized):
        decode_token(token)


def test_expired_token_is_rejected():
    token = create_access_token({"userId": 7}, expires_delta=timedelta(minutes=-61))
    with pytest.raises(Unauthorized):
        decode_token(token)


def test_missing_token_is_rejected():
    with pytest.raises(Unauthorized):
        decode_token(None)
    with pytest.raises(Unauthorized):
        decode_token("")


def test_signing_without_secret_is_config_error(monkeypatch):
    monkeypatch.setattr("taskboard_server.auth.settings.jwt_secret", None)
    with pytest.raises(ConfigError):
        create_access_token({"userId": 7})
