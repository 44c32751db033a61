"""Tests for the in-memory calendar session registry."""

from api.dependencies import ExpiringRegistry


def test_get_and_pop():
    registry = ExpiringRegistry(ttl_seconds=60, max_entries=10)
    registry.set("a", 1)

    assert registry.get("a") == 1
    assert registry.pop("a") == 1
    assert registry.get("a") is None
    assert registry.pop("a") is None


def test_expired_entries_are_dropped():
    registry = ExpiringRegistry(ttl_seconds=0, max_entries=10)
    registry.set("a", 1)

    assert registry.get("a") is None
    assert len(registry) == 0


def test_least_recently_used_evicted_at_capacity():
    registry = ExpiringRegistry(ttl_seconds=60, max_entries=2)
    registry.set("a", 1)
    registry.set("b", 2)
    registry.get("a")
    registry.set("c", 3)

    assert len(registry) == 2
    assert registry.get("b") is None
    assert registry.get("a") == 1
    assert registry.get("c") == 3
