# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hmac

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# Passwords use the library defaults (argon2id, RFC 9106 low-memory profile).
_PH = PasswordHasher()

# Session secrets are 256 bits of randomness, a lighter profile is enough.
_TOKEN_PH = PasswordHasher(time_cost=1, memory_cost=8192, parallelism=1)

_DUMMY_HASH = _PH.hash("eauth-dummy-password")


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerificationError, InvalidHashError):
        return False


def burn_password_check(plain: str) -> None:
    """Spend the time of a real verification, for lookups that found nothing."""
    verify_password(_DUMMY_HASH, plain or "x")


def hash_token(secret: str) -> str:
    if not secret:
        raise ValueError("Empty token")
    return _TOKEN_PH.hash(secret)


def verify_token(hash_value: str, secret: str) -> bool:
    if not hash_value or not secret:
        return False
    try:
        return _TOKEN_PH.verify(hash_value, secret)
    except (VerificationError, InvalidHashError):
        return False


def compare_secrets(expected: str, provided: str) -> bool:
    if not expected or not provided:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
