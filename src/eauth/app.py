# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from eauth import __version__
from eauth.auth import IdentityRegistrar, Outcome, SessionAuthority
from eauth.config import Settings, load_settings
from eauth.middleware import AuthContext, BearerAuth
from eauth.store import CredentialStore, build_store

log = logging.getLogger(__name__)

PUBLIC_PATHS = {"/login", "/register"}

_STATUS = {
    Outcome.INVALID: 400,
    Outcome.AUTH_FAILED: 401,
    Outcome.CONFLICT: 409,
}


class Credentials(BaseModel):
    username: str = ""
    password: str = ""


def _error(outcome: Outcome, message: Optional[str]) -> JSONResponse:
    return JSONResponse(status_code=_STATUS.get(outcome, 400), content={"detail": message or ""})


def create_app(settings: Optional[Settings] = None, store: Optional[CredentialStore] = None) -> FastAPI:
    settings = settings or load_settings()
    store = store if store is not None else build_store(settings)

    registrar = IdentityRegistrar(store)
    authority = SessionAuthority(
        store,
        token_hashing=settings.token_hashing,
        max_age=settings.session_max_age,
    )
    auth = BearerAuth(authority, store)

    app = FastAPI(title="eauth", version=__version__)
    app.state.store = store
    app.state.registrar = registrar
    app.state.authority = authority

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        if request.url.path not in PUBLIC_PATHS:
            request.state.auth = await auth.load(request)
        return await call_next(request)

    @app.post("/register", status_code=201)
    async def register(body: Credentials):
        result = await run_in_threadpool(registrar.register, body.username, body.password)
        if not result.ok:
            return _error(result.outcome, result.error)
        return {"id": result.value}

    @app.post("/login")
    async def login(body: Credentials):
        result = await run_in_threadpool(authority.login, body.username, body.password)
        if not result.ok:
            return _error(result.outcome, result.error)
        return {"token": result.value}

    @app.post("/logout", status_code=204)
    async def logout(ctx: AuthContext = Depends(auth)):
        await run_in_threadpool(authority.logout, ctx.user.session_id)
        return Response(status_code=204)

    @app.get("/me")
    async def me(ctx: AuthContext = Depends(auth)):
        return {"id": ctx.user.id, "username": ctx.user.username}

    log.info(f"eauth app ready (store={settings.store}, token_hashing={settings.token_hashing})")
    return app
