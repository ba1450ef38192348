"""Cache-then-fetch request orchestration.

A request first serves the persisted record for its key (when present and
not expired), then fetches fresh content, persists it, and delivers it
again only if it differs from what was already served.

Example:
    >>> client = CacheRequestClient(store, KeyDeriver(identity_provider))
    >>> await client.request(
    ...     "profile",
    ...     decode=Profile.model_validate,
    ...     fetch=api.get_profile,
    ...     on_success=lambda data, from_cache: render(data),
    ...     on_error=show_error,
    ...     max_age=timedelta(hours=1),
    ... )
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from dataclasses import dataclass
from datetime import timedelta
import inspect
import logging
from types import TracebackType
from typing import Any, Generic, TypeVar

from swrcache.core.api import ApiResponse

from .canonical import contents_equal
from .codec import decode_record, encode_record, make_record, now_ms
from .errors import CacheRequestFailed, CorruptRecord, EncodeError, StoreError
from .keys import KeyDeriver
from .models import CachedRecord, CacheEvent, CacheOutcome
from .protocols import RecordStore
from .staleness import is_usable, record_age

logger = logging.getLogger(__name__)

T = TypeVar("T")

Decode = Callable[[Any], T]
Fetch = Callable[[], Awaitable[ApiResponse]]
OnSuccess = Callable[[T, bool], Any]
OnError = Callable[[str], Any]

CACHE_MISS_MESSAGE = "cache not exists or expired"
REQUEST_FAILED_MESSAGE = "request failed"


@dataclass(frozen=True)
class _CacheHit(Generic[T]):
    data: T
    content: Any


@dataclass(frozen=True)
class _Failure:
    message: str


class _Suppressed:
    pass


_SUPPRESSED = _Suppressed()


async def _invoke(callback: Callable[..., Any], *args: Any) -> None:
    """Call a sync or async callback."""
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


class CacheRequestClient:
    """
    Stale-while-revalidate request cache.

    Storage and codec failures are absorbed and logged; callers only
    observe success deliveries or a single error delivery. The one
    exception is `IdentityUnavailable`, raised before any callback when an
    identity-bound key is requested without an authenticated identity.

    Calls for the same key are not serialized against each other; the
    last write wins.
    """

    def __init__(
        self,
        store: RecordStore,
        key_deriver: KeyDeriver | None = None,
        default_max_age: timedelta | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """
        Initialize the request cache.

        Args:
            store: Record store shared by all requests
            key_deriver: Final key derivation (no identity provider by default)
            default_max_age: Max age used when a request passes none
            clock: Current time in epoch milliseconds
        """
        self.store = store
        self.key_deriver = key_deriver or KeyDeriver()
        self.default_max_age = default_max_age
        self._clock = clock

    async def open(self) -> None:
        """Open the underlying record store."""
        await self.store.open()

    async def close(self) -> None:
        """Close the underlying record store."""
        await self.store.close()

    async def __aenter__(self) -> CacheRequestClient:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def request(
        self,
        cache_key: str,
        *,
        decode: Decode[T],
        bind_identity: bool = False,
        fetch: Fetch | None = None,
        on_success: OnSuccess[T] | None = None,
        on_error: OnError | None = None,
        max_age: timedelta | None = None,
    ) -> CacheOutcome:
        """
        Serve the cached result, then revalidate it with a fresh fetch.

        Args:
            cache_key: Logical cache key
            decode: Builds the domain object from a content tree
            bind_identity: Scope the key to the current identity
            fetch: Async function returning an ApiResponse; None for cache-only
            on_success: Called with (data, from_cache) for each delivery
            on_error: Called with a message when nothing could be delivered
            max_age: Max record age (falls back to the client default;
                None for both means records never expire)

        Returns:
            Terminal outcome of the call

        Raises:
            IdentityUnavailable: If bind_identity is set and no identity is
                authenticated (no callback is invoked)
        """
        final_key = self.key_deriver.derive(cache_key, bind_identity)
        delivered = False

        async with aclosing(self._run(final_key, decode, fetch, max_age)) as items:
            async for item in items:
                if isinstance(item, CacheEvent):
                    delivered = True
                    if on_success is not None:
                        await _invoke(on_success, item.data, item.from_cache)
                elif isinstance(item, _Failure):
                    if on_error is not None:
                        await _invoke(on_error, item.message)
                    return CacheOutcome.ERRORED
                else:
                    return CacheOutcome.SUPPRESSED

        return CacheOutcome.DELIVERED if delivered else CacheOutcome.ERRORED

    async def stream(
        self,
        cache_key: str,
        *,
        decode: Decode[T],
        bind_identity: bool = False,
        fetch: Fetch | None = None,
        max_age: timedelta | None = None,
    ) -> AsyncIterator[CacheEvent[T]]:
        """
        Same protocol as `request()`, exposed as an async iterator.

        Yields zero to two events (cached, then fresh). Where `request()`
        would invoke its error callback, raises `CacheRequestFailed` after
        the (empty) event sequence.

        Raises:
            IdentityUnavailable: If bind_identity is set and no identity is
                authenticated
            CacheRequestFailed: If nothing could be delivered

        Example:
            >>> async for event in client.stream("profile", decode=Profile.model_validate, fetch=f):
            ...     render(event.data, stale=event.from_cache)
        """
        final_key = self.key_deriver.derive(cache_key, bind_identity)

        async with aclosing(self._run(final_key, decode, fetch, max_age)) as items:
            async for item in items:
                if isinstance(item, CacheEvent):
                    yield item
                elif isinstance(item, _Failure):
                    raise CacheRequestFailed(item.message, key=final_key)

    async def remove_cache(self, cache_key: str, *, bind_identity: bool = False) -> None:
        """
        Remove the persisted record for a key.

        Raises:
            IdentityUnavailable: If bind_identity is set and no identity is
                authenticated
        """
        final_key = self.key_deriver.derive(cache_key, bind_identity)
        await self._discard(final_key, "removed by caller")

    async def peek(self, cache_key: str, *, bind_identity: bool = False) -> CachedRecord | None:
        """
        Return the persisted record without expiry checks or domain decoding.

        Unreadable or corrupt records are reported as None and left in place.
        """
        final_key = self.key_deriver.derive(cache_key, bind_identity)
        try:
            raw = await self.store.get(final_key)
            return None if raw is None else decode_record(raw)
        except (StoreError, CorruptRecord) as e:
            logger.warning(f"Cannot inspect cache record: {e}")
            return None

    async def _run(
        self,
        final_key: str,
        decode: Decode[T],
        fetch: Fetch | None,
        max_age: timedelta | None,
    ) -> AsyncIterator[CacheEvent[T] | _Failure | _Suppressed]:
        """Cache phase then fetch phase; never parallelized."""
        hit = await self._load_cached(final_key, decode, max_age)
        if hit is not None:
            yield CacheEvent(hit.data, from_cache=True)

        if fetch is None:
            if hit is None:
                yield _Failure(CACHE_MISS_MESSAGE)
            return

        try:
            response = await fetch()
        except Exception as e:
            logger.warning(f"Fetch failed for {final_key}: {_describe(e)}")
            if hit is None:
                yield _Failure(_describe(e))
            return

        if not response.is_succeed:
            logger.debug(f"Fetch returned code {response.code} for {final_key}")
            if hit is None:
                message = response.message if response.message is not None else REQUEST_FAILED_MESSAGE
                yield _Failure(message)
            return

        try:
            fresh = decode(response.content)
        except Exception as e:
            logger.warning(f"Failed to decode fresh content for {final_key}: {_describe(e)}")
            if hit is None:
                yield _Failure(_describe(e))
            return

        await self._save(final_key, response.content)

        if hit is not None and contents_equal(hit.content, response.content):
            logger.debug(f"Fresh content unchanged for {final_key}, skipping delivery")
            yield _SUPPRESSED
            return

        yield CacheEvent(fresh, from_cache=False)

    async def _load_cached(
        self,
        final_key: str,
        decode: Decode[T],
        max_age: timedelta | None,
    ) -> _CacheHit[T] | None:
        """Read, validate, and decode the persisted record; None on any miss."""
        try:
            raw = await self.store.get(final_key)
        except StoreError as e:
            logger.warning(f"Cache read failed, treating as miss: {e}")
            await self._discard(final_key, "unreadable")
            return None

        if raw is None:
            logger.debug(f"Cache miss: {final_key}")
            return None

        try:
            record = decode_record(raw)
        except CorruptRecord as e:
            logger.warning(f"Corrupt cache record for {final_key}: {e}")
            await self._discard(final_key, "corrupt")
            return None

        effective_max_age = max_age if max_age is not None else self.default_max_age
        now = self._clock()
        if not is_usable(record, effective_max_age, now):
            age = record_age(record, now)
            logger.debug(f"Cache expired: {final_key}, age {age.total_seconds() / 60:.1f} minutes")
            await self._discard(final_key, "expired")
            return None

        if record.content is None:
            logger.debug(f"Cache record without content: {final_key}")
            await self._discard(final_key, "empty content")
            return None

        try:
            data = decode(record.content)
        except Exception as e:
            logger.warning(f"Failed to decode cached content for {final_key}: {_describe(e)}")
            await self._discard(final_key, "undecodable content")
            return None

        logger.debug(f"Cache hit: {final_key}")
        return _CacheHit(data=data, content=record.content)

    async def _save(self, final_key: str, content: Any) -> None:
        """Persist fresh content; failures are logged and skipped."""
        try:
            record = make_record(content, self._clock())
            await self.store.put(final_key, encode_record(record))
        except (EncodeError, StoreError) as e:
            logger.warning(f"Cache save failed for {final_key}: {e}")
            return
        logger.debug(f"Cache saved: {final_key}")

    async def _discard(self, final_key: str, reason: str) -> None:
        """Delete a record; failures are logged and skipped."""
        try:
            await self.store.delete(final_key)
        except StoreError as e:
            logger.warning(f"Cache clear failed for {final_key}: {e}")
            return
        logger.debug(f"Cache cleared ({reason}): {final_key}")
