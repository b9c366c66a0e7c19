# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication core.

This package provides:
- Password and token-at-rest hashing (argon2)
- Identity registration
- Session tokens: login, verification, logout
"""

from eauth.auth.registrar import IdentityRegistrar
from eauth.auth.results import Outcome, Result
from eauth.auth.sessions import SessionAuthority

__all__ = ["IdentityRegistrar", "Outcome", "Result", "SessionAuthority"]
