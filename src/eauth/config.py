# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

STORE_BACKENDS = {"memory", "yaml", "sql"}

_TRUTHY = {"1", "true", "yes", "y"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    store: str = "memory"
    store_path: Path = Path("data/credentials.yml")
    database_url: str = "sqlite:///data/eauth.db"
    token_hashing: bool = True
    session_max_age: Optional[int] = None
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


def load_settings() -> Settings:
    store = (os.getenv("EAUTH_STORE") or "memory").strip().lower()
    if store not in STORE_BACKENDS:
        raise ValueError(f"EAUTH_STORE must be one of {sorted(STORE_BACKENDS)}, got {store!r}")

    max_age = _env_int("EAUTH_SESSION_MAX_AGE", 0)
    if max_age < 0:
        raise ValueError("EAUTH_SESSION_MAX_AGE cannot be negative")

    return Settings(
        store=store,
        store_path=Path(os.getenv("EAUTH_STORE_PATH", "data/credentials.yml")).resolve(),
        database_url=os.getenv("EAUTH_DATABASE_URL", "sqlite:///data/eauth.db"),
        token_hashing=_env_bool("EAUTH_TOKEN_HASHING", True),
        session_max_age=max_age or None,
        host=os.getenv("EAUTH_HOST", "0.0.0.0"),
        port=_env_int("EAUTH_PORT", 8000),
        reload=_env_bool("EAUTH_RELOAD", False),
    )
