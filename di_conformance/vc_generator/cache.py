"""Run-scoped cache of generated credential fixtures."""

import asyncio
import logging
from copy import deepcopy
from typing import Any, Dict, List, Optional, Tuple

from ..core.error import BaseError
from .data import VALID_VC

LOGGER = logging.getLogger(__name__)

VALID_VC_ID = "validVc"

CacheKey = Tuple[str, str]


class CacheError(BaseError):
    """Base class for cache-related errors."""


class FixtureCache:
    """Fixtures keyed by suite name and generator id.

    Entries are written once and handed out as deep copies. There is no
    eviction; `flush` drops everything.
    """

    def __init__(self):
        """Initialize the cache instance."""
        self._suites: Dict[str, Dict[str, Any]] = {}
        self._key_locks: Dict[CacheKey, "FixtureKeyLock"] = {}

    def ensure(self, suite_name: str) -> dict:
        """Get the live mapping of a suite, seeded with the canonical valid VC."""
        if suite_name not in self._suites:
            self._suites[suite_name] = {VALID_VC_ID: deepcopy(VALID_VC)}
        return self._suites[suite_name]

    def has(self, suite_name: str, generator_id: str) -> bool:
        """Check whether a fixture is stored."""
        return generator_id in self._suites.get(suite_name, {})

    def get(self, suite_name: str, generator_id: str) -> Optional[Any]:
        """Get a copy of a stored fixture, or `None`."""
        found = self._suites.get(suite_name, {}).get(generator_id)
        return deepcopy(found)

    def clone(self, suite_name: str, generator_id: str) -> Any:
        """Get a copy of a stored fixture, which must exist."""
        if not self.has(suite_name, generator_id):
            raise CacheError(f"No fixture {generator_id} for suite {suite_name}")
        return self.get(suite_name, generator_id)

    def set(self, suite_name: str, generator_id: str, artifact: Any):
        """Store a copy of a fixture."""
        self._suites.setdefault(suite_name, {})[generator_id] = deepcopy(artifact)

    def ids(self, suite_name: str) -> List[str]:
        """List the fixture ids stored for a suite."""
        return list(self._suites.get(suite_name, {}))

    def suites(self) -> List[str]:
        """List the suite names with fixtures."""
        return list(self._suites)

    def flush(self):
        """Remove all fixtures."""
        self._suites.clear()
        self._key_locks.clear()

    def acquire(self, suite_name: str, generator_id: str) -> "FixtureKeyLock":
        """Acquire the one-shot generation lock of a fixture key."""
        key = (suite_name, generator_id)
        result = FixtureKeyLock(self, key)
        first = self._key_locks.setdefault(key, result)
        if first is not result:
            result.parent = first
        return result

    def release(self, key: CacheKey):
        """Release the lock on a given fixture key."""
        self._key_locks.pop(key, None)

    def __repr__(self) -> str:
        """Human readable representation of this instance."""
        return "<{}(suites={})>".format(self.__class__.__name__, self.suites())


class FixtureKeyLock:
    """A lock on one fixture key.

    The first acquirer generates the fixture and calls `set_result`; later
    acquirers of the same key wait for that result. Not thread safe.
    """

    def __init__(self, cache: FixtureCache, key: CacheKey):
        """Initialize the key lock."""
        self.cache = cache
        self.exception: Optional[BaseException] = None
        self.key = key
        self.released = False
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._parent: Optional["FixtureKeyLock"] = None

    @property
    def done(self) -> bool:
        """Accessor for the done state."""
        return self._future.done()

    @property
    def result(self) -> Any:
        """Fetch a copy of the current result, if any."""
        if self.done:
            return deepcopy(self._future.result())

    @property
    def parent(self) -> Optional["FixtureKeyLock"]:
        """Accessor for the parent key lock, if any."""
        return self._parent

    @parent.setter
    def parent(self, parent: "FixtureKeyLock"):
        self._parent = parent
        parent._future.add_done_callback(self._handle_parent_done)

    def _handle_parent_done(self, fut: asyncio.Future):
        # a parent that produced nothing leaves this lock to generate itself
        result = fut.result()
        if result is not None and not self._future.done():
            self._future.set_result(result)

    async def set_result(self, value: Any):
        """Set the result, updating the cache and any waiters."""
        if self.done:
            raise CacheError(f"Result already set for {self.key}")
        self._future.set_result(deepcopy(value))
        self.cache.set(*self.key, value)

    def __await__(self):
        """Wait for a result to be produced."""
        return (yield from self._future)

    async def __aenter__(self):
        """Async context manager entry."""
        result = None
        if self.parent:
            result = await self.parent
            if result is not None:
                await self
        if result is None and self.cache.has(*self.key):
            self._future.set_result(self.cache.get(*self.key))
        return self

    def release(self):
        """Release the cache lock."""
        if not self.parent and not self.released:
            self.cache.release(self.key)
            self.released = True

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit.

        `None` is returned to any waiters if no value is produced.
        """
        if exc_val:
            self.exception = exc_val
        if not self.done:
            self._future.set_result(None)
        self.release()


_DEFAULT_CACHE: Optional[FixtureCache] = None


def get_default_cache() -> FixtureCache:
    """Return the cache shared by a run, creating it on first use."""
    global _DEFAULT_CACHE
    if _DEFAULT_CACHE is None:
        _DEFAULT_CACHE = FixtureCache()
    return _DEFAULT_CACHE


def reset_default_cache():
    """Drop the shared cache so the next run regenerates every fixture."""
    global _DEFAULT_CACHE
    _DEFAULT_CACHE = None
