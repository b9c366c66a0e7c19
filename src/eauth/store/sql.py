# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Relational credential store (SQLAlchemy Core).

Tables follow the classic two-table layout: ``users(uuid, username, password)``
and ``sessions(session_id, token, uuid, created_at)``. Username uniqueness is a
database constraint, so concurrent registrations are serialised by the database.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    insert,
    select,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from eauth.errors import DuplicateUsernameError, StoreError
from eauth.store.base import Identity, SessionRecord

log = logging.getLogger(__name__)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("uuid", String(36), primary_key=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
)

sessions = Table(
    "sessions",
    metadata,
    Column("session_id", String(64), primary_key=True),
    Column("token", String(255), nullable=False),
    Column("uuid", String(36), ForeignKey("users.uuid"), nullable=False, index=True),
    Column("created_at", Float, nullable=False),
)

_IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


def make_engine(url: str) -> Engine:
    if url in _IN_MEMORY_URLS:
        # One shared connection, otherwise every thread gets its own empty database.
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database:
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, pool_pre_ping=True)


def _identity(row) -> Identity:
    return Identity(id=row.uuid, username=row.username, password_hash=row.password)


def _session(row) -> SessionRecord:
    return SessionRecord(
        session_id=row.session_id,
        token=row.token,
        user_id=row.uuid,
        created_at=float(row.created_at),
    )


class SqlCredentialStore:
    def __init__(self, engine: Union[Engine, str], *, create_tables: bool = True):
        self.engine = make_engine(engine) if isinstance(engine, str) else engine
        if create_tables:
            try:
                metadata.create_all(self.engine)
            except SQLAlchemyError as e:
                log.error(f"Cannot create credential tables: {e}")
                raise StoreError("Cannot create credential tables") from e

    def insert_identity(self, identity: Identity) -> None:
        stmt = insert(users).values(
            uuid=identity.id,
            username=identity.username,
            password=identity.password_hash,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except IntegrityError as e:
            # Constraint names differ per dialect, so ask which row is in the way.
            if self.find_identity_by_username(identity.username) is not None:
                raise DuplicateUsernameError(identity.username) from e
            log.error(f"insert_identity violated a constraint other than username: {e}")
            raise StoreError("insert_identity failed") from e
        except SQLAlchemyError as e:
            log.error(f"insert_identity failed: {e}")
            raise StoreError("insert_identity failed") from e

    def _fetch_identity(self, stmt) -> Optional[Identity]:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as e:
            log.error(f"identity lookup failed: {e}")
            raise StoreError("identity lookup failed") from e
        return _identity(row) if row is not None else None

    def find_identity_by_username(self, username: str) -> Optional[Identity]:
        return self._fetch_identity(select(users).where(users.c.username == username))

    def find_identity_by_id(self, identity_id: str) -> Optional[Identity]:
        return self._fetch_identity(select(users).where(users.c.uuid == identity_id))

    def insert_session(self, session: SessionRecord) -> None:
        stmt = insert(sessions).values(
            session_id=session.session_id,
            token=session.token,
            uuid=session.user_id,
            created_at=session.created_at,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            log.error(f"insert_session failed: {e}")
            raise StoreError("insert_session failed") from e

    def find_session_by_id(self, session_id: str) -> Optional[SessionRecord]:
        stmt = select(sessions).where(sessions.c.session_id == session_id)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except SQLAlchemyError as e:
            log.error(f"session lookup failed: {e}")
            raise StoreError("session lookup failed") from e
        return _session(row) if row is not None else None

    def delete_session_by_id(self, session_id: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(delete(sessions).where(sessions.c.session_id == session_id))
        except SQLAlchemyError as e:
            log.error(f"delete_session failed: {e}")
            raise StoreError("delete_session failed") from e
