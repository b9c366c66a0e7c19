# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store backed by a single YAML document.

Layout::

    version: 1
    users:
      alice:
        id: 6f1c...
        password_hash: $argon2id$...
    sessions:
      0a1b2c3d4e5f6a7b:
        token: $argon2id$...
        user_id: 6f1c...
        created_at: 1767225600.0
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from eauth.errors import DuplicateUsernameError, StoreError
from eauth.store.base import Identity, SessionRecord

log = logging.getLogger(__name__)


def _parse_users(raw: Dict[str, Any]) -> Dict[str, Identity]:
    users = raw.get("users") or {}
    out: Dict[str, Identity] = {}
    if not isinstance(users, dict):
        return out
    for uname, udata in users.items():
        if not isinstance(udata, dict):
            continue
        username = str(uname).strip()
        uid = str(udata.get("id") or "").strip()
        if not username or not uid:
            continue
        out[username] = Identity(
            id=uid,
            username=username,
            password_hash=str(udata.get("password_hash") or ""),
        )
    return out


def _parse_sessions(raw: Dict[str, Any]) -> Dict[str, SessionRecord]:
    sessions = raw.get("sessions") or {}
    out: Dict[str, SessionRecord] = {}
    if not isinstance(sessions, dict):
        return out
    for sid, sdata in sessions.items():
        if not isinstance(sdata, dict):
            continue
        out[str(sid)] = SessionRecord(
            session_id=str(sid),
            token=str(sdata.get("token") or ""),
            user_id=str(sdata.get("user_id") or ""),
            created_at=float(sdata.get("created_at") or 0.0),
        )
    return out


class YamlCredentialStore:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"version": 1, "users": {}, "sessions": {}}
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            log.error(f"Cannot read credential file {self.path}: {e}")
            raise StoreError(f"Cannot read credential file {self.path}") from e
        if not isinstance(raw, dict):
            raise StoreError(f"Credential file {self.path} is not a mapping")
        if not isinstance(raw.get("users"), dict):
            raw["users"] = {}
        if not isinstance(raw.get("sessions"), dict):
            raw["sessions"] = {}
        return raw

    def _write(self, raw: Dict[str, Any]) -> None:
        # Replace the file in one step so readers never see a partial document.
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            log.error(f"Cannot write credential file {self.path}: {e}")
            raise StoreError(f"Cannot write credential file {self.path}") from e

    def insert_identity(self, identity: Identity) -> None:
        with self._lock:
            raw = self._read()
            if identity.username in raw["users"]:
                raise DuplicateUsernameError(identity.username)
            raw["users"][identity.username] = {
                "id": identity.id,
                "password_hash": identity.password_hash,
            }
            self._write(raw)

    def find_identity_by_username(self, username: str) -> Optional[Identity]:
        with self._lock:
            return _parse_users(self._read()).get(username)

    def find_identity_by_id(self, identity_id: str) -> Optional[Identity]:
        with self._lock:
            users = _parse_users(self._read())
        for identity in users.values():
            if identity.id == identity_id:
                return identity
        return None

    def insert_session(self, session: SessionRecord) -> None:
        with self._lock:
            raw = self._read()
            if session.session_id in raw["sessions"]:
                raise StoreError(f"Session id collision: {session.session_id}")
            raw["sessions"][session.session_id] = {
                "token": session.token,
                "user_id": session.user_id,
                "created_at": session.created_at,
            }
            self._write(raw)

    def find_session_by_id(self, session_id: str) -> Optional[SessionRecord]:
        with self._lock:
            return _parse_sessions(self._read()).get(session_id)

    def delete_session_by_id(self, session_id: str) -> None:
        with self._lock:
            raw = self._read()
            if raw["sessions"].pop(session_id, None) is None:
                return
            self._write(raw)
