"""Async iterator over count-paginated API listings."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, AsyncIterator, Awaitable, Callable, Iterable, TypeVar

if TYPE_CHECKING:
    from crunchyroll_sdk.executor import Executor

log = logging.getLogger(__name__)

T = TypeVar("T")

Query = list[tuple[str, str]]
PageFn = Callable[[int, "Executor", Query], Awaitable[tuple[list[T], int]]]


class Pagination(AsyncIterator[T]):
    """Yields items one at a time from a listing the server reveals page by page.

    ``next_fn(count, executor, query)`` is called with the number of items
    consumed so far and must return ``(items, total)``. A whole page is
    buffered and drained before the next one is requested; a new page is only
    requested while ``count < total``.

    The cursor is meant for a single consumer. Cancelling a pull keeps the
    in-flight page request so the next pull picks it up instead of sending it
    again. A failed page request is not retried; the error is raised from the
    pull and the next pull sends the same request again.
    """

    def __init__(
        self,
        next_fn: PageFn[T],
        executor: Executor,
        query: Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._next_fn = next_fn
        self._executor = executor
        self._query: Query = list(query) if query else []
        self._buffer: list[T] = []
        self._next_state: asyncio.Future[tuple[list[T], int]] | None = None
        self._init = False
        self._exhausted = False
        self._count = 0
        self._total = 0

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        if not self._buffer:
            if self._exhausted or (self._init and self._count >= self._total):
                raise StopAsyncIteration
            await self._fetch_page()
            if not self._buffer:
                raise StopAsyncIteration
        self._count += 1
        return self._buffer.pop(0)

    @property
    def count(self) -> int:
        """Number of items yielded so far."""
        return self._count

    async def total(self) -> int:
        """Total number of items the listing declares.

        Requests the first page if nothing was fetched yet; no item is consumed.
        """
        if not self._init:
            await self._fetch_page()
        return self._total

    async def flatten(self) -> list[T]:
        """Consume the full iterator into a list."""
        result: list[T] = []
        async for item in self:
            result.append(item)
        return result

    async def aclose(self) -> None:
        """End the cursor and cancel a page request a cancelled pull left running."""
        fut, self._next_state = self._next_state, None
        self._exhausted = True
        self._buffer.clear()
        if fut is not None:
            fut.cancel()
            await asyncio.gather(fut, return_exceptions=True)

    async def _fetch_page(self) -> None:
        if self._next_state is None:
            self._next_state = asyncio.ensure_future(
                self._next_fn(self._count, self._executor, list(self._query))
            )
        fut = self._next_state
        try:
            items, total = await asyncio.shield(fut)
        except BaseException:
            # a cancelled pull leaves a still running request in place
            if fut.done() and (fut.cancelled() or fut.exception() is not None):
                self._next_state = None
            raise

        self._next_state = None
        self._buffer = list(items)
        self._total = total
        self._init = True
        log.debug("fetched page at %d: %d items, total %d", self._count, len(self._buffer), total)

        if not self._buffer and self._count < self._total:
            log.warning(
                "empty page at %d of %d declared items, ending pagination", self._count, total
            )
            self._exhausted = True
