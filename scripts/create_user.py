#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from eauth.auth import IdentityRegistrar, Outcome
from eauth.config import load_settings
from eauth.store import build_store


def main() -> None:
    settings = load_settings()
    if settings.store == "memory":
        raise SystemExit("EAUTH_STORE=memory does not persist, use yaml or sql")

    registrar = IdentityRegistrar(build_store(settings))

    username = input("Username: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    result = registrar.register(username, pw1)
    if result.outcome is Outcome.CONFLICT:
        raise SystemExit(f"User '{username}' already exists")
    if not result.ok:
        raise SystemExit(result.error or "Registration failed")
    print(f"OK -> {username} ({result.value})")


if __name__ == "__main__":
    main()
