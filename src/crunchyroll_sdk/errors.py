"""SDK exception hierarchy."""

from __future__ import annotations

from typing import Any

import httpx


class CrunchyrollError(Exception):
    """Base class for every error raised by the SDK."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DecodeError(CrunchyrollError, ValueError):
    """Raised when a response does not have the expected shape.

    Subclasses ``ValueError`` so it can be raised from inside pydantic
    validators and is reported as a regular validation failure there.
    """


class InputError(CrunchyrollError):
    """Raised when caller supplied input does not resolve to anything usable."""


class InternalError(CrunchyrollError):
    """Raised when the API breaks an invariant the SDK relies on."""


class ExternalError(CrunchyrollError):
    """Raised when a local, non-HTTP operation fails (e.g. writing a file)."""


def _error_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for key in ("message", "error", "code"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class RequestError(CrunchyrollError):
    """Raised when a request fails or the API returns a non-2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        self.status = status
        self.response = response
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> RequestError:
        """Build from an httpx response, attempting to parse the error body."""
        msg: str | None = None
        try:
            msg = _error_message(response.json())
        except ValueError:
            pass
        status = response.status_code
        return cls(f"[{status}] {msg or f'HTTP {status}'}", status=status, response=response)

    @property
    def body(self) -> str:
        return self.response.text if self.response is not None else ""


class NetworkError(RequestError):
    """Raised when a transport-level error occurs (connection refused, timeout, etc.)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
