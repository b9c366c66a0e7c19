# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import threading
from typing import Dict, Optional

from eauth.errors import DuplicateUsernameError, StoreError
from eauth.store.base import Identity, SessionRecord


class InMemoryCredentialStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[str, Identity] = {}  # username -> identity
        self._sessions: Dict[str, SessionRecord] = {}

    def insert_identity(self, identity: Identity) -> None:
        with self._lock:
            if identity.username in self._users:
                raise DuplicateUsernameError(identity.username)
            self._users[identity.username] = identity

    def find_identity_by_username(self, username: str) -> Optional[Identity]:
        with self._lock:
            return self._users.get(username)

    def find_identity_by_id(self, identity_id: str) -> Optional[Identity]:
        with self._lock:
            for identity in self._users.values():
                if identity.id == identity_id:
                    return identity
        return None

    def insert_session(self, session: SessionRecord) -> None:
        with self._lock:
            if session.session_id in self._sessions:
                raise StoreError(f"Session id collision: {session.session_id}")
            self._sessions[session.session_id] = session

    def find_session_by_id(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete_session_by_id(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def identity_count(self) -> int:
        with self._lock:
            return len(self._users)

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)
