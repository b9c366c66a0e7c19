# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Identity:
    id: str
    username: str
    password_hash: str


@dataclass(frozen=True)
class SessionRecord:
    session_id: str
    token: str  # argon2 hash of the secret, or the secret itself when token hashing is off
    user_id: str
    created_at: float


class CredentialStore(Protocol):
    """Persistence used by the registrar and the session authority.

    Implementations must enforce username uniqueness themselves and raise
    ``DuplicateUsernameError`` from ``insert_identity`` when it is violated.
    Infrastructure failures are raised as ``StoreError``.
    """

    def insert_identity(self, identity: Identity) -> None: ...

    def find_identity_by_username(self, username: str) -> Optional[Identity]: ...

    def find_identity_by_id(self, identity_id: str) -> Optional[Identity]: ...

    def insert_session(self, session: SessionRecord) -> None: ...

    def find_session_by_id(self, session_id: str) -> Optional[SessionRecord]: ...

    def delete_session_by_id(self, session_id: str) -> None: ...
