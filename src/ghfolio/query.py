"""Cached query execution with retries, staleness and garbage collection.

A :class:`Query` describes one dataset: its key, how to fetch it, how long
a result stays fresh and how long an unobserved result is kept. The
:class:`QueryClient` runs queries through a small state machine::

    idle -> loading -> success | error

Fresh results are served from memory. Otherwise the fetch runs with the
query's retry policy; successes are written through to the
:class:`~ghfolio.cache.CacheStore` and failures fall back to it. Only when
both the live call and the cache come up empty does a query end in
``error``.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Generic, TypeVar

from ghfolio.cache import CacheStore
from ghfolio.github_client import ErrorKind, GitHubAPIError
from ghfolio.retry import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_GC_TIME = 5 * 60


class QueryStatus(StrEnum):
    """Lifecycle state of a query result."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Snapshot of a query as seen by consumers.

    A result served from the persisted cache after a failed fetch is a
    plain success; consumers cannot tell it apart from live data.

    Attributes:
        status: Current lifecycle state.
        data: Last successful payload, if any.
        error: User-facing error message when status is ERROR.
        error_kind: Classified error when status is ERROR.
        updated_at: Epoch seconds of the last successful result.
    """

    status: QueryStatus = QueryStatus.IDLE
    data: T | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    updated_at: float | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS


Listener = Callable[[QueryResult], None]


@dataclass(frozen=True)
class Query(Generic[T]):
    """Definition of one cached dataset.

    Attributes:
        key: Unique result key, also used as the persisted cache key.
        fetch: Coroutine function producing fresh data.
        encode: Converts data to a JSON-serializable cache payload.
        decode: Rebuilds data from a cache payload.
        stale_time: Seconds a successful result is served without refetching.
        gc_time: Seconds an unobserved result is kept in memory.
        retry: Retry policy for failed fetches.
    """

    key: str
    fetch: Callable[[], Awaitable[T]]
    encode: Callable[[T], Any]
    decode: Callable[[Any], T]
    stale_time: float
    gc_time: float = DEFAULT_GC_TIME
    retry: RetryPolicy = field(default_factory=RetryPolicy)


@dataclass
class _Entry:
    result: QueryResult = field(default_factory=QueryResult)
    listeners: list[Listener] = field(default_factory=list)
    inactive_since: float | None = None
    gc_time: float = DEFAULT_GC_TIME
    task: asyncio.Task | None = None
    invalidated: bool = False


class QueryClient:
    """In-memory result cache in front of the persisted CacheStore.

    Attributes:
        cache: Persisted payload cache used for write-through and fallback.
    """

    def __init__(self, cache: CacheStore, clock: Callable[[], float] = time.time):
        """Initialize the client.

        Args:
            cache: Persisted cache shared by all queries.
            clock: Returns the current time in epoch seconds.
        """
        self.cache = cache
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def _entry(self, key: str) -> _Entry:
        entry = self._entries.get(key)
        if entry is None:
            entry = _Entry(inactive_since=self._clock())
            self._entries[key] = entry
        return entry

    def get_result(self, key: str) -> QueryResult:
        """Return the current result for key without fetching."""
        entry = self._entries.get(key)
        return entry.result if entry else QueryResult()

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """Call listener on every state change of key.

        Args:
            key: Query key.
            listener: Called with the new QueryResult.

        Returns:
            Function that removes the subscription.
        """
        entry = self._entry(key)
        entry.listeners.append(listener)
        entry.inactive_since = None

        def unsubscribe() -> None:
            if listener in entry.listeners:
                entry.listeners.remove(listener)
            if not entry.listeners:
                entry.inactive_since = self._clock()

        return unsubscribe

    async def observe(self, query: Query, listener: Listener) -> Callable[[], None]:
        """Subscribe to a query and fetch it.

        The listener first receives the current result, then every
        transition caused by the fetch.

        Returns:
            Function that removes the subscription.
        """
        unsubscribe = self.subscribe(query.key, listener)
        listener(self.get_result(query.key))
        await self.fetch(query)
        return unsubscribe

    def invalidate(self, key: str | None = None) -> None:
        """Mark one or all results stale so the next fetch hits the network."""
        keys = [key] if key else list(self._entries)
        for k in keys:
            if k in self._entries:
                self._entries[k].invalidated = True

    def collect_garbage(self) -> list[str]:
        """Drop results nobody has observed for longer than their gc_time.

        The persisted cache is left untouched.

        Returns:
            Keys that were dropped.
        """
        now = self._clock()
        dropped = []
        for key, entry in list(self._entries.items()):
            if entry.listeners or entry.task is not None or entry.inactive_since is None:
                continue
            if now - entry.inactive_since > entry.gc_time:
                del self._entries[key]
                dropped.append(key)
        if dropped:
            logger.debug("Garbage collected query results: %s", ", ".join(dropped))
        return dropped

    def _is_fresh(self, entry: _Entry, query: Query) -> bool:
        result = entry.result
        return (
            result.is_success
            and not entry.invalidated
            and result.updated_at is not None
            and self._clock() - result.updated_at < query.stale_time
        )

    def _transition(self, entry: _Entry, result: QueryResult) -> None:
        entry.result = result
        for listener in list(entry.listeners):
            listener(result)

    async def fetch(self, query: Query[T]) -> QueryResult[T]:
        """Return a result for query, fetching it when stale or absent.

        Concurrent calls for the same key share one in-flight fetch. If the
        caller is cancelled, the fetch still completes and its result is
        kept.

        Args:
            query: Query definition.

        Returns:
            Success (live or cached data) or error result.
        """
        self.collect_garbage()
        entry = self._entry(query.key)
        entry.gc_time = query.gc_time
        if not entry.listeners:
            entry.inactive_since = self._clock()

        if self._is_fresh(entry, query):
            return entry.result

        if entry.task is None:
            entry.task = asyncio.create_task(
                self._run(query, entry), name=f"query:{query.key}"
            )
            entry.task.add_done_callback(self._log_task_failure)
        return await asyncio.shield(entry.task)

    @staticmethod
    def _log_task_failure(task: asyncio.Task) -> None:
        # Callers may have been cancelled, so nobody else is left to retrieve this
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Query task %s failed", task.get_name(), exc_info=error)

    async def _run(self, query: Query[T], entry: _Entry) -> QueryResult[T]:
        try:
            self._transition(
                entry,
                replace(entry.result, status=QueryStatus.LOADING, error=None, error_kind=None),
            )
            failure_count = 0
            while True:
                try:
                    data = await query.fetch()
                    break
                except GitHubAPIError as e:
                    failure_count += 1
                    if not query.retry.should_retry(failure_count, e):
                        return self._fail(query, entry, e)
                    delay = query.retry.delay(failure_count - 1)
                    logger.info(
                        "Fetching %s failed (%s), retry %d in %.1fs",
                        query.key,
                        e.kind,
                        failure_count,
                        delay,
                    )
                    await asyncio.sleep(delay)

            self.cache.set(query.key, query.encode(data))
            return self._succeed(entry, data)
        finally:
            entry.task = None

    def _succeed(self, entry: _Entry, data: Any) -> QueryResult:
        entry.invalidated = False
        result = QueryResult(status=QueryStatus.SUCCESS, data=data, updated_at=self._clock())
        self._transition(entry, result)
        return result

    def _fail(self, query: Query, entry: _Entry, error: GitHubAPIError) -> QueryResult:
        cached = self.cache.get(query.key)
        if cached is not None:
            try:
                data = query.decode(cached)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Ignoring cached %s that no longer decodes: %s", query.key, e)
                self.cache.clear(query.key)
            else:
                logger.warning("Fetching %s failed (%s), returning cached data", query.key, error)
                return self._succeed(entry, data)

        if error.kind != ErrorKind.NETWORK_UNREACHABLE:
            logger.error("Error fetching %s: %s", query.key, error)
        result = QueryResult(
            status=QueryStatus.ERROR,
            data=entry.result.data,
            error=error.user_message,
            error_kind=error.kind,
            updated_at=entry.result.updated_at,
        )
        self._transition(entry, result)
        return result
