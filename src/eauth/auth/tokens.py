# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
from typing import Optional, Tuple

SEPARATOR = "."
SESSION_ID_BYTES = 8  # 16 hex chars
SECRET_BYTES = 32  # 64 hex chars


def new_session_id() -> str:
    return secrets.token_hex(SESSION_ID_BYTES)


def new_secret() -> str:
    return secrets.token_hex(SECRET_BYTES)


def compose(session_id: str, secret: str) -> str:
    return f"{session_id}{SEPARATOR}{secret}"


def split(token: object) -> Optional[Tuple[str, str]]:
    """Return ``(session_id, secret)`` or None unless the token has exactly two non-empty parts."""
    if not isinstance(token, str) or not token:
        return None
    parts = token.split(SEPARATOR)
    if len(parts) != 2:
        return None
    sid, secret = parts
    if not sid or not secret:
        return None
    return sid, secret
