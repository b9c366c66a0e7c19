import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import pytest

from eauth.auth import IdentityRegistrar, SessionAuthority
from eauth.store import InMemoryCredentialStore


class FakeClock:
    def __init__(self, now: float = 1_767_225_600.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture()
def registrar(store) -> IdentityRegistrar:
    return IdentityRegistrar(store)


@pytest.fixture()
def authority(store) -> SessionAuthority:
    return SessionAuthority(store)


@pytest.fixture()
def plain_authority(store) -> SessionAuthority:
    """Authority that stores session secrets without hashing them."""
    return SessionAuthority(store, token_hashing=False)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def alice(registrar):
    result = registrar.register("alice", "S3cret!")
    assert result.ok
    return result.value
