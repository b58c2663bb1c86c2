"""High-level Crunchyroll client composing HTTP and the shared executor."""

from __future__ import annotations

from typing import Any, TypeVar

from crunchyroll_sdk.executor import Executor, ExecutorDetails
from crunchyroll_sdk.http import DEFAULT_BASE_URL, HTTPClient
from crunchyroll_sdk.models.common import V2BulkResult
from crunchyroll_sdk.models.media import Media, MediaCollection, Video, bulk_page_fn
from crunchyroll_sdk.models.options import BrowseOptions
from crunchyroll_sdk.pagination import Pagination

M = TypeVar("M", bound=Video)


class Crunchyroll:
    """Top-level SDK client.

    Authentication happens elsewhere; pass the access token and the account
    details it belongs to::

        async with Crunchyroll(token, details) as crunchy:
            series = await crunchy.media_from_id("GY8VEQ95Y", Series)
            async for item in series.similar():
                print(item.media.title)
    """

    def __init__(
        self,
        token: str | None = None,
        details: ExecutorDetails | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self.http = HTTPClient(base_url, token, timeout=timeout)
        self.executor = Executor(self.http, details)

    async def media_from_id(self, id: str, metadata_type: type[M]) -> Media[M]:
        """Get a media by id, e.g. ``await crunchy.media_from_id(id, Episode)``."""
        return await Media[metadata_type].from_id(self.executor, id)  # type: ignore[valid-type]

    async def media_collection_from_id(self, id: str) -> MediaCollection:
        """Get a media by id without knowing its type up front."""
        return await MediaCollection.from_id(self.executor, id)

    def browse(self, options: BrowseOptions | None = None) -> Pagination[MediaCollection]:
        """Browse the catalogue, fetched lazily page by page."""
        options = options or BrowseOptions()
        return Pagination(
            bulk_page_fn("/content/v2/discover/browse", V2BulkResult[MediaCollection]),
            self.executor,
            options.into_query(),
        )

    # --- Context manager ---

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> Crunchyroll:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
