# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    CONFLICT = "conflict"
    AUTH_FAILED = "auth_failed"


@dataclass(frozen=True)
class Result:
    outcome: Outcome
    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


def missing(*values: object) -> bool:
    return any(not isinstance(v, str) or not v for v in values)


def success(value: Optional[str] = None) -> Result:
    return Result(Outcome.OK, value=value)


def invalid(message: str) -> Result:
    return Result(Outcome.INVALID, error=message)


USERNAME_TAKEN = Result(Outcome.CONFLICT, error="An account with this username already exists")

# The only value login ever returns on a bad username or password.
AUTH_FAILED = Result(Outcome.AUTH_FAILED, error="Invalid credentials")
