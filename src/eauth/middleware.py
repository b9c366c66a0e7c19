# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from eauth.auth import tokens
from eauth.auth.sessions import SessionAuthority
from eauth.store.base import CredentialStore

log = logging.getLogger(__name__)

UNAUTHORIZED = "Unauthorized"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    username: str
    token: str

    @property
    def session_id(self) -> str:
        return self.token.split(tokens.SEPARATOR, 1)[0]


@dataclass(frozen=True)
class AuthContext:
    user: CurrentUser


def bearer_token(header: Optional[str]) -> Optional[str]:
    parts = (header or "").split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def resolve_context(
    authority: SessionAuthority,
    store: CredentialStore,
    header: Optional[str],
) -> Optional[AuthContext]:
    """Turn an Authorization header into an AuthContext, or None on any failure."""
    try:
        token = bearer_token(header)
        if not token or not authority.verify(token):
            return None
        sid, _ = tokens.split(token)
        owner_id = authority.resolve_owner(sid)
        if not owner_id:
            return None
        identity = store.find_identity_by_id(owner_id)
        if identity is None:
            return None
        return AuthContext(user=CurrentUser(id=identity.id, username=identity.username, token=token))
    except Exception:
        log.warning("Auth context resolution failed", exc_info=True)
        return None


class BearerAuth:
    """FastAPI dependency guarding routes with session tokens.

    Usage:
        auth = BearerAuth(authority, store)

        @app.get("/me")
        async def me(ctx: AuthContext = Depends(auth)):
            return {"username": ctx.user.username}
    """

    def __init__(self, authority: SessionAuthority, store: CredentialStore):
        self.authority = authority
        self.store = store

    async def load(self, request: Request) -> Optional[AuthContext]:
        header = request.headers.get("authorization")
        if not header:
            return None
        # argon2 verification is CPU bound, keep it off the event loop
        return await run_in_threadpool(resolve_context, self.authority, self.store, header)

    async def optional(self, request: Request) -> Optional[AuthContext]:
        # The middleware may already have resolved this request, None included.
        if hasattr(request.state, "auth"):
            return request.state.auth
        return await self.load(request)

    async def __call__(self, request: Request) -> AuthContext:
        ctx = await self.optional(request)
        if ctx is None:
            raise HTTPException(
                status_code=401,
                detail=UNAUTHORIZED,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return ctx
