"""HTTP client wrapping httpx with auth headers and retry."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from crunchyroll_sdk.errors import NetworkError, RequestError

log = logging.getLogger(__name__)

# cms and content endpoints live here; beta-api.crunchyroll.com serves the same
# paths and can be passed as base_url instead
DEFAULT_BASE_URL = "https://beta.crunchyroll.com"

_MAX_RETRIES = 3
_BASE_RETRY_DELAY = 1.0
_RETRYABLE_STATUSES = {500, 502, 503, 504}


class HTTPClient:
    """Async HTTP client for the Crunchyroll REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
        )

    @property
    def token(self) -> str | None:
        return self._token

    @token.setter
    def token(self, value: str | None) -> None:
        self._token = value

    def _headers(self) -> dict[str, str]:
        h: dict[str, str] = {}
        if self._token:
            h["Authorization"] = f"Bearer {self._token}"
        return h

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: Any = None,
        headers: dict[str, str] | None = None,
        auth: bool = True,
    ) -> httpx.Response:
        """Make an API request, retrying on 429 and transient 5xx responses.

        Pass ``auth=False`` for urls outside the API (CDN hosts) so the bearer
        token is not sent there.
        """
        merged_headers = self._headers() if auth else {}
        if headers:
            merged_headers.update(headers)

        for attempt in range(_MAX_RETRIES):
            try:
                response = await self._client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=merged_headers,
                )
            except httpx.TransportError as exc:
                raise NetworkError(str(exc)) from exc

            if response.status_code == 429:
                retry_after = _BASE_RETRY_DELAY
                ra_header = response.headers.get("retry-after")
                if ra_header:
                    try:
                        retry_after = float(ra_header)
                    except ValueError:
                        pass
                if attempt < _MAX_RETRIES - 1:
                    log.debug("%s %s rate limited, retrying in %.2fs", method, url, retry_after)
                    await asyncio.sleep(retry_after)
                    continue
                raise RequestError.from_response(response)

            if response.status_code in _RETRYABLE_STATUSES:
                if attempt < _MAX_RETRIES - 1:
                    delay = _BASE_RETRY_DELAY * (2 ** attempt)
                    log.debug(
                        "%s %s returned %d, retrying in %.2fs",
                        method, url, response.status_code, delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise RequestError.from_response(response)

            if response.status_code >= 400:
                raise RequestError.from_response(response)

            return response

        raise RequestError.from_response(response)  # type: ignore[possibly-undefined]

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def close(self) -> None:
        await self._client.aclose()
