import pytest
from tripmate.realtime.presence import InMemoryPresenceStore

@pytest.mark.unit
def test_last_connected_wins():
    store = InMemoryPresenceStore()
    store.set(42, "sid-a")
    store.set(42, "sid-b")
    assert store.get(42) == "sid-b"
    assert len(store) == 1

@pytest.mark.unit
def test_discard_only_removes_matching_sid():
    store = InMemoryPresenceStore()
    store.set(42, "sid-new")
    assert store.discard(42, "sid-old") is False
    assert store.get(42) == "sid-new"
    assert store.discard(42, "sid-new") is True
    assert 42 not in store

@pytest.mark.unit
def test_delete_missing_user_is_noop():
    store = InMemoryPresenceStore()
    store.delete(7)
    assert store.get(7) is None
    assert 7 not in store
    assert len(store) == 0
