"""
Request cache shared by the page handlers.

Every key is built by `CacheKeys` and always starts with
(user_id, scope). Filter parameters follow, so two users, or one user
with two different filters, never share an entry.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Hashable, Iterable, Optional, TypeVar

from bittle.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = tuple[Hashable, ...]


class CacheKeys:
    FORMS = "forms"
    ORGANIZATION = "organization"
    FAMILY_TREES = "family_trees"
    FAMILY_TREE = "family_tree"
    CHALLENGES = "challenges"
    CONNECTIONS = "connections"
    POINT_SUBMISSIONS = "point_submissions"
    SUBMISSIONS = "submissions"

    # Scopes holding any part of a family tree; a tree mutation drops them all
    TREE_SCOPES = (FAMILY_TREE, FAMILY_TREES, CONNECTIONS, CHALLENGES, POINT_SUBMISSIONS)

    @staticmethod
    def forms(user_id: str, author_id: str) -> CacheKey:
        return (user_id, CacheKeys.FORMS, author_id)

    @staticmethod
    def organization(user_id: str, organization_id: str) -> CacheKey:
        return (user_id, CacheKeys.ORGANIZATION, organization_id)

    @staticmethod
    def family_trees(user_id: str, author_id: str) -> CacheKey:
        return (user_id, CacheKeys.FAMILY_TREES, author_id)

    @staticmethod
    def family_tree(user_id: str, code: str) -> CacheKey:
        return (user_id, CacheKeys.FAMILY_TREE, code)

    @staticmethod
    def challenges(user_id: str, family_tree_id: str) -> CacheKey:
        return (user_id, CacheKeys.CHALLENGES, family_tree_id)

    @staticmethod
    def connections(user_id: str, family_tree_id: str) -> CacheKey:
        return (user_id, CacheKeys.CONNECTIONS, family_tree_id)

    @staticmethod
    def point_submissions(user_id: str, connection_id: str) -> CacheKey:
        return (user_id, CacheKeys.POINT_SUBMISSIONS, connection_id)

    @staticmethod
    def submissions(user_id: str, form_id: str) -> CacheKey:
        return (user_id, CacheKeys.SUBMISSIONS, form_id)


class QueryCache:
    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = 100,
    ):
        self.ttl_seconds = settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.sweep_every = max(1, sweep_every)
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}
        self._sets_since_sweep = 0
        self._lock = threading.Lock()

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl_seconds

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        stale = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for k in stale:
            del self._entries[k]
        if stale:
            logger.debug("Swept %d expired cache entries", len(stale))

    def get(self, key: CacheKey) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                return None
            return value

    def set(self, key: CacheKey, value: Any) -> None:
        """Store a value; every `sweep_every` sets also drops expired entries."""
        with self._lock:
            now = self._clock()
            self._sets_since_sweep += 1
            if self._sets_since_sweep >= self.sweep_every:
                self._sweep(now)
                self._sets_since_sweep = 0
            self._entries[key] = (now, value)

    def get_or_fetch(self, key: CacheKey, fetch: Callable[[], T]) -> T:
        cached = self.get(key)
        if cached is not None:
            return cached
        # Failed fetches raise before anything is stored
        value = fetch()
        self.set(key, value)
        return value

    def invalidate(self, user_id: str, scope: str, *params: Hashable) -> int:
        """
        Drop every entry under (user_id, scope, *params). With no params the
        whole scope is dropped for that user.
        """
        prefix = (user_id, scope, *params)
        with self._lock:
            doomed = [k for k in self._entries if k[: len(prefix)] == prefix]
            for k in doomed:
                del self._entries[k]
        if doomed:
            logger.debug("Invalidated %d cache entries under %s", len(doomed), prefix)
        return len(doomed)

    def invalidate_scopes(self, user_id: str, scopes: Iterable[str]) -> int:
        return sum(self.invalidate(user_id, scope) for scope in scopes)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


# Process-wide instance used by the request context
query_cache = QueryCache()
