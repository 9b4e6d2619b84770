"""
Shared pytest fixtures.

Every fixture builds its stores over a fresh in-memory key-value store, so
tests never touch the user's preference file.
"""

import pytest

from infrastructure.kv_store import InMemoryKeyValueStore
from infrastructure.preferences import PreferencesManager
from infrastructure.reference_store import ReferenceListStore
from infrastructure.tag_store import TagStore


class FakeNameResolver:
    """Resolver backed by a dict; unknown references resolve to None."""

    def __init__(self, names=None):
        self.names = dict(names or {})
        self.calls = 0

    def resolve_display_name(self, reference):
        self.calls += 1
        return self.names.get(reference)


class FailingNameResolver:
    """Resolver whose lookups always raise, like an unreachable content provider."""

    def __init__(self, error=OSError):
        self.error = error

    def resolve_display_name(self, reference):
        raise self.error(f"provider gone for {reference}")


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def ref_store(kv):
    return ReferenceListStore(kv)


@pytest.fixture
def tag_store(kv, ref_store):
    return TagStore(kv, ref_store)


@pytest.fixture
def resolver():
    return FakeNameResolver()


@pytest.fixture
def prefs(kv, resolver):
    return PreferencesManager(kv, resolver=resolver)
