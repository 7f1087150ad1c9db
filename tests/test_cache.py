from __future__ import annotations

import pytest

from bittle.core.cache import CacheKeys, QueryCache


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_keys_differ_by_user_and_filter() -> None:
    assert CacheKeys.forms("u1", "u1") != CacheKeys.forms("u2", "u2")
    assert CacheKeys.family_tree("u1", "AAAA") != CacheKeys.family_tree("u1", "BBBB")
    assert CacheKeys.challenges("u1", "t1") != CacheKeys.connections("u1", "t1")
    assert CacheKeys.forms("u1", "u1")[:2] == ("u1", CacheKeys.FORMS)


def test_get_or_fetch_caches_per_key() -> None:
    cache = QueryCache(ttl_seconds=30)
    calls = []

    def fetch(tag):
        def _fetch():
            calls.append(tag)
            return [tag]
        return _fetch

    assert cache.get_or_fetch(CacheKeys.forms("u1", "u1"), fetch("u1")) == ["u1"]
    assert cache.get_or_fetch(CacheKeys.forms("u1", "u1"), fetch("again")) == ["u1"]
    assert cache.get_or_fetch(CacheKeys.forms("u2", "u2"), fetch("u2")) == ["u2"]
    assert calls == ["u1", "u2"]


def test_failed_fetch_is_not_stored() -> None:
    cache = QueryCache(ttl_seconds=30)
    key = CacheKeys.organization("u1", "u1")

    def boom():
        raise RuntimeError("down")

    with pytest.raises(RuntimeError):
        cache.get_or_fetch(key, boom)
    assert cache.get(key) is None


def test_entries_expire() -> None:
    clock = _Clock()
    cache = QueryCache(ttl_seconds=30, clock=clock)
    key = CacheKeys.challenges("u1", "t1")
    cache.set(key, ["c"])

    clock.now = 29
    assert cache.get(key) == ["c"]
    clock.now = 31
    assert cache.get(key) is None


def test_invalidate_scope_only_touches_that_user() -> None:
    cache = QueryCache(ttl_seconds=30)
    cache.set(CacheKeys.family_tree("u1", "AAAA"), "a")
    cache.set(CacheKeys.family_tree("u1", "BBBB"), "b")
    cache.set(CacheKeys.family_tree("u2", "AAAA"), "other user")
    cache.set(CacheKeys.forms("u1", "u1"), "forms")

    assert cache.invalidate("u1", CacheKeys.FAMILY_TREE) == 2
    assert cache.get(CacheKeys.family_tree("u1", "AAAA")) is None
    assert cache.get(CacheKeys.family_tree("u2", "AAAA")) == "other user"
    assert cache.get(CacheKeys.forms("u1", "u1")) == "forms"


def test_invalidate_single_param() -> None:
    cache = QueryCache(ttl_seconds=30)
    cache.set(CacheKeys.point_submissions("u1", "c1"), [1])
    cache.set(CacheKeys.point_submissions("u1", "c2"), [2])

    assert cache.invalidate("u1", CacheKeys.POINT_SUBMISSIONS, "c1") == 1
    assert cache.get(CacheKeys.point_submissions("u1", "c2")) == [2]


def test_expired_entries_are_swept_on_set() -> None:
    clock = _Clock()
    cache = QueryCache(ttl_seconds=30, clock=clock, sweep_every=10)
    for i in range(9):
        cache.set(CacheKeys.family_tree("u1", f"CODE{i}"), i)
    assert len(cache._entries) == 9

    clock.now = 31
    # the tenth set triggers the sweep; only the fresh entry remains
    cache.set(CacheKeys.family_tree("u1", "FRESH"), "fresh")
    assert list(cache._entries) == [CacheKeys.family_tree("u1", "FRESH")]


def test_unexpired_entries_survive_sweep() -> None:
    clock = _Clock()
    cache = QueryCache(ttl_seconds=30, clock=clock, sweep_every=2)
    cache.set(CacheKeys.forms("u1", "u1"), ["a"])
    clock.now = 10
    cache.set(CacheKeys.forms("u2", "u2"), ["b"])
    assert len(cache._entries) == 2


def test_invalidate_scopes_drops_every_tree_view() -> None:
    cache = QueryCache(ttl_seconds=30)
    cache.set(CacheKeys.family_tree("u1", "XQ7Z"), "tree")
    cache.set(CacheKeys.connections("u1", "t1"), ["c"])
    cache.set(CacheKeys.challenges("u1", "t1"), ["ch"])
    cache.set(CacheKeys.forms("u1", "u1"), ["f"])
    cache.set(CacheKeys.connections("u2", "t9"), ["other"])

    assert cache.invalidate_scopes("u1", CacheKeys.TREE_SCOPES) == 3
    assert cache.get(CacheKeys.forms("u1", "u1")) == ["f"]
    assert cache.get(CacheKeys.connections("u2", "t9")) == ["other"]
