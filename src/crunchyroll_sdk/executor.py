"""Shared execution context handed to every decoded model.

An :class:`Executor` bundles the HTTP client with the account and locale
details needed to build query strings. It is created once per
:class:`~crunchyroll_sdk.client.Crunchyroll` and shared, read-only, by every
model and pagination cursor produced through it.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Iterable

import httpx
from pydantic import ConfigDict, TypeAdapter, ValidationError

from crunchyroll_sdk.errors import DecodeError
from crunchyroll_sdk.http import HTTPClient
from crunchyroll_sdk.models.base import CrunchyModel, bind_executor
from crunchyroll_sdk.models.enums import Locale

log = logging.getLogger(__name__)


class ExecutorDetails(CrunchyModel):
    """Account, region and locale settings used to build requests."""

    model_config = ConfigDict(frozen=True)

    locale: str = Locale.en_US.value
    preferred_audio_locale: str | None = None
    account_id: str = ""
    bucket: str = ""
    premium: bool = False

    # CMS request signing
    policy: str = ""
    signature: str = ""
    key_pair_id: str = ""


@lru_cache(maxsize=None)
def _adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


class RequestBuilder:
    """Accumulates query parameters for a single GET request."""

    def __init__(self, executor: Executor, url: str) -> None:
        self._executor = executor
        self.url = url
        self.params: list[tuple[str, str]] = []

    def query(self, pairs: Iterable[tuple[str, Any]]) -> RequestBuilder:
        self.params.extend((key, str(value)) for key, value in pairs)
        return self

    def apply_media_query(self) -> RequestBuilder:
        return self.query(self._executor.media_query())

    def apply_locale_query(self) -> RequestBuilder:
        return self.query(self._executor.locale_query())

    async def send(self) -> httpx.Response:
        return await self._executor.http.get(self.url, params=self.params)

    async def request(self, model: Any) -> Any:
        """Send the request and decode the body as ``model``."""
        return await self._executor.request(self, model)


class Executor:
    def __init__(self, http: HTTPClient, details: ExecutorDetails | None = None) -> None:
        self.http = http
        self.details = details or ExecutorDetails()

    def get(self, url: str) -> RequestBuilder:
        return RequestBuilder(self, url)

    async def request(self, builder: RequestBuilder, model: Any) -> Any:
        log.debug("GET %s", builder.url)
        response = await builder.send()
        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(f"response from {builder.url} is not valid json: {exc}") from exc
        return self.decode(data, model)

    def decode(self, data: Any, model: Any) -> Any:
        """Validate ``data`` as ``model`` and inject this executor into the result."""
        try:
            value = _adapter(model).validate_python(data)
        except ValidationError as exc:
            raise DecodeError(str(exc)) from exc
        bind_executor(value, self)
        return value

    def media_query(self) -> list[tuple[str, str]]:
        return [
            ("Policy", self.details.policy),
            ("Signature", self.details.signature),
            ("Key-Pair-Id", self.details.key_pair_id),
        ]

    def locale_query(self) -> list[tuple[str, str]]:
        query = [("locale", self.details.locale)]
        if self.details.preferred_audio_locale:
            query.append(("preferred_audio_language", self.details.preferred_audio_locale))
        return query
