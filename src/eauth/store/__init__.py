# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from eauth.config import Settings
from eauth.store.base import CredentialStore, Identity, SessionRecord
from eauth.store.memory import InMemoryCredentialStore
from eauth.store.sql import SqlCredentialStore
from eauth.store.yaml_store import YamlCredentialStore


def build_store(settings: Settings) -> CredentialStore:
    if settings.store == "yaml":
        return YamlCredentialStore(settings.store_path)
    if settings.store == "sql":
        return SqlCredentialStore(settings.database_url)
    return InMemoryCredentialStore()


__all__ = [
    "CredentialStore",
    "Identity",
    "InMemoryCredentialStore",
    "SessionRecord",
    "SqlCredentialStore",
    "YamlCredentialStore",
    "build_store",
]
