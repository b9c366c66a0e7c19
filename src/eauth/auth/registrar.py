# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import uuid

from eauth.auth import results
from eauth.auth.passwords import hash_password
from eauth.auth.results import Result
from eauth.errors import DuplicateUsernameError
from eauth.store.base import CredentialStore, Identity

log = logging.getLogger(__name__)


class IdentityRegistrar:
    def __init__(self, store: CredentialStore):
        if store is None:
            raise RuntimeError("IdentityRegistrar needs a credential store")
        self.store = store

    def user_exists(self, username: str) -> bool:
        if not username:
            return False
        return self.store.find_identity_by_username(username) is not None

    def register(self, username: str, password: str) -> Result:
        if results.missing(username, password):
            return results.invalid("Username and password must be provided")

        password_hash = hash_password(password)

        # Advisory only: the store's uniqueness constraint is what actually holds.
        if self.user_exists(username):
            log.info(f"Registration rejected, username taken: {username}")
            return results.USERNAME_TAKEN

        identity = Identity(id=str(uuid.uuid4()), username=username, password_hash=password_hash)
        try:
            self.store.insert_identity(identity)
        except DuplicateUsernameError:
            log.info(f"Registration lost a race for username: {username}")
            return results.USERNAME_TAKEN

        log.info(f"Registered identity {identity.id} ({username})")
        return results.success(identity.id)
