# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations


class EauthError(Exception):
    pass


class StoreError(EauthError):
    """The credential store could not complete an operation."""


class DuplicateUsernameError(StoreError):
    def __init__(self, username: str):
        super().__init__(f"Username already taken: {username}")
        self.username = username
