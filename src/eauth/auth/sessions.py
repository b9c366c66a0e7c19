# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from eauth.auth import results, tokens
from eauth.auth.passwords import (
    burn_password_check,
    compare_secrets,
    hash_token,
    verify_password,
    verify_token,
)
from eauth.auth.results import Result
from eauth.store.base import CredentialStore, SessionRecord

log = logging.getLogger(__name__)


class SessionAuthority:
    """Issues, verifies and revokes ``<session_id>.<secret>`` bearer tokens.

    With ``token_hashing`` on (the default) only an argon2 hash of the secret is
    stored, so a leaked store cannot be replayed as tokens. Turning it off stores
    the secret itself and trades that protection for cheaper verification.

    ``max_age`` (seconds) makes sessions expire; ``None`` keeps them valid until
    logout.
    """

    def __init__(
        self,
        store: CredentialStore,
        *,
        token_hashing: bool = True,
        max_age: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        if store is None:
            raise RuntimeError("SessionAuthority needs a credential store")
        self.store = store
        self.token_hashing = token_hashing
        self.max_age = max_age or None
        self._clock = clock

    def login(self, username: str, password: str) -> Result:
        if results.missing(username, password):
            return results.invalid("Username and password must be provided")

        identity = self.store.find_identity_by_username(username)
        if identity is None:
            burn_password_check(password)
            log.info(f"Login failed for {username}")
            return results.AUTH_FAILED

        if not verify_password(identity.password_hash, password):
            log.info(f"Login failed for {username}")
            return results.AUTH_FAILED

        sid = tokens.new_session_id()
        secret = tokens.new_secret()
        representation = hash_token(secret) if self.token_hashing else secret

        self.store.insert_session(
            SessionRecord(
                session_id=sid,
                token=representation,
                user_id=identity.id,
                created_at=self._clock(),
            )
        )
        log.info(f"Opened session {sid} for {username}")
        return results.success(tokens.compose(sid, secret))

    def _live_session(self, session_id: str) -> Optional[SessionRecord]:
        session = self.store.find_session_by_id(session_id)
        if session is None:
            return None
        if self.max_age is not None and self._clock() - session.created_at > self.max_age:
            return None
        return session

    def verify(self, token: str) -> bool:
        parts = tokens.split(token)
        if parts is None:
            return False
        sid, secret = parts

        session = self._live_session(sid)
        if session is None:
            return False

        if self.token_hashing:
            return verify_token(session.token, secret)
        return compare_secrets(session.token, secret)

    def logout(self, session_id: str) -> Result:
        if results.missing(session_id):
            return results.invalid("Session id must be provided")
        self.store.delete_session_by_id(session_id)
        log.info(f"Closed session {session_id}")
        return results.success()

    def resolve_owner(self, session_id: str) -> Optional[str]:
        if results.missing(session_id):
            return None
        session = self._live_session(session_id)
        return session.user_id if session is not None else None
