import re

import pytest

from eauth.auth import IdentityRegistrar, Outcome, SessionAuthority
from eauth.auth.results import AUTH_FAILED
from eauth.errors import StoreError
from eauth.store import InMemoryCredentialStore


class CountingStore(InMemoryCredentialStore):
    def __init__(self):
        super().__init__()
        self.session_lookups = 0

    def find_session_by_id(self, session_id):
        self.session_lookups += 1
        return super().find_session_by_id(session_id)


def test_alice_scenario(registrar, authority):
    assert registrar.register("alice", "S3cret!").ok

    result = authority.login("alice", "S3cret!")
    assert result.ok
    token = result.value
    assert re.fullmatch(r"[0-9a-f]{16}\.[0-9a-f]{64}", token)
    assert authority.verify(token)

    sid = token.split(".")[0]
    authority.logout(sid)
    assert not authority.verify(token)


@pytest.mark.parametrize("hashing", [True, False])
def test_login_then_verify(store, alice, hashing):
    authority = SessionAuthority(store, token_hashing=hashing)
    token = authority.login("alice", "S3cret!").value
    assert authority.verify(token)


def test_stored_representation_is_hashed(store, alice, authority):
    token = authority.login("alice", "S3cret!").value
    sid, secret = token.split(".")
    session = store.find_session_by_id(sid)
    assert session.user_id == alice
    assert session.token != secret
    assert session.token.startswith("$argon2")


def test_plain_mode_stores_secret(store, alice, plain_authority):
    token = plain_authority.login("alice", "S3cret!").value
    sid, secret = token.split(".")
    assert store.find_session_by_id(sid).token == secret


@pytest.mark.parametrize("hashing", [True, False])
def test_tampered_secret_fails(store, alice, hashing):
    authority = SessionAuthority(store, token_hashing=hashing)
    sid, secret = authority.login("alice", "S3cret!").value.split(".")
    flipped = ("0" if secret[0] != "0" else "1") + secret[1:]
    assert not authority.verify(f"{sid}.{flipped}")
    assert not authority.verify(f"{sid}.{secret[:-1]}")


@pytest.mark.parametrize("token", ["", "nodot", "a.b.c", ".abc", "abc.", None])
def test_malformed_token_never_hits_store(token):
    store = CountingStore()
    authority = SessionAuthority(store)
    assert authority.verify(token) is False
    assert store.session_lookups == 0


def test_unknown_session_is_invalid(authority):
    assert authority.verify("0123456789abcdef." + "a" * 64) is False


def test_wrong_password_looks_like_unknown_user(alice, authority):
    wrong = authority.login("alice", "wrong")
    nobody = authority.login("nobody", "x")
    assert wrong == nobody == AUTH_FAILED
    assert wrong.outcome is Outcome.AUTH_FAILED
    assert wrong.value is None


def test_login_missing_arguments(authority, store):
    assert authority.login("", "x").outcome is Outcome.INVALID
    assert authority.login("alice", "").outcome is Outcome.INVALID
    assert store.session_count() == 0


def test_each_login_gets_its_own_session(store, alice, authority):
    t1 = authority.login("alice", "S3cret!").value
    t2 = authority.login("alice", "S3cret!").value
    assert t1 != t2
    assert store.session_count() == 2
    authority.logout(t1.split(".")[0])
    assert not authority.verify(t1)
    assert authority.verify(t2)


def test_logout_is_idempotent(alice, authority):
    token = authority.login("alice", "S3cret!").value
    sid = token.split(".")[0]
    assert authority.logout(sid).ok
    assert authority.logout(sid).ok
    assert not authority.verify(token)


def test_logout_requires_session_id(authority):
    assert authority.logout("").outcome is Outcome.INVALID


def test_resolve_owner(alice, authority):
    sid = authority.login("alice", "S3cret!").value.split(".")[0]
    assert authority.resolve_owner(sid) == alice
    assert authority.resolve_owner("feedfacefeedface") is None
    authority.logout(sid)
    assert authority.resolve_owner(sid) is None


def test_sessions_expire_when_max_age_is_set(store, alice, clock):
    authority = SessionAuthority(store, max_age=60, clock=clock)
    token = authority.login("alice", "S3cret!").value
    sid = token.split(".")[0]
    clock.advance(59)
    assert authority.verify(token)
    clock.advance(2)
    assert not authority.verify(token)
    assert authority.resolve_owner(sid) is None


def test_no_expiry_by_default(store, alice, clock):
    authority = SessionAuthority(store, clock=clock)
    token = authority.login("alice", "S3cret!").value
    clock.advance(10 * 365 * 24 * 3600)
    assert authority.verify(token)


def test_store_is_required():
    with pytest.raises(RuntimeError):
        SessionAuthority(None)


def test_secrets_are_not_logged(store, alice, authority, caplog):
    caplog.set_level("DEBUG")
    token = authority.login("alice", "S3cret!").value
    sid, secret = token.split(".")
    stored = store.find_session_by_id(sid).token
    authority.verify(token)
    authority.verify(f"{sid}.{secret[::-1]}")
    authority.logout(sid)
    assert secret not in caplog.text
    assert stored not in caplog.text
    assert store.find_identity_by_username("alice").password_hash not in caplog.text
    assert "S3cret!" not in caplog.text


class BrokenStore(InMemoryCredentialStore):
    def __init__(self, failing):
        super().__init__()
        self.failing = failing

    def _maybe_fail(self, name):
        if name in self.failing:
            raise StoreError("database is down")

    def find_identity_by_username(self, username):
        self._maybe_fail("find_identity_by_username")
        return super().find_identity_by_username(username)

    def insert_session(self, session):
        self._maybe_fail("insert_session")
        super().insert_session(session)

    def delete_session_by_id(self, session_id):
        self._maybe_fail("delete_session_by_id")
        super().delete_session_by_id(session_id)


@pytest.mark.parametrize("failing", ["find_identity_by_username", "insert_session"])
def test_login_store_failure_propagates(failing):
    store = BrokenStore(failing=set())
    assert IdentityRegistrar(store).register("alice", "S3cret!").ok
    store.failing = {failing}
    with pytest.raises(StoreError):
        SessionAuthority(store).login("alice", "S3cret!")


def test_logout_store_failure_propagates():
    store = BrokenStore(failing={"delete_session_by_id"})
    with pytest.raises(StoreError):
        SessionAuthority(store).logout("ab12cd34ab12cd34")
