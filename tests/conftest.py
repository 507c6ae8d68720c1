import pytest
from ledgervault.lib.storage import MemoryKeyValueStore
from ledgervault.lib.session import VaultSession

@pytest.fixture
def store():
    return MemoryKeyValueStore()

@pytest.fixture
def session(store):
    s = VaultSession(store)
    yield s
    s.logout()
