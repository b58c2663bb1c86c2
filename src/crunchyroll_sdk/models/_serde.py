"""Field-level conversions for values the API encodes awkwardly."""

from __future__ import annotations

from datetime import timedelta
from typing import Any


def millis_to_duration(value: Any) -> Any:
    """Integer milliseconds to :class:`~datetime.timedelta`."""
    if isinstance(value, bool):
        raise ValueError("a number representing milliseconds is required")
    if isinstance(value, int):
        return timedelta(milliseconds=value)
    if isinstance(value, float) and value.is_integer():
        return timedelta(milliseconds=int(value))
    if isinstance(value, timedelta):
        return value
    raise ValueError("a number representing milliseconds is required")


def null_to_zero(value: Any) -> Any:
    return 0 if value is None else value


def broken_locale_list(value: Any) -> list[str]:
    # Seasons sometimes send null or empty entries here.
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("a list of locales is required")
    return [locale for locale in value if isinstance(locale, str) and locale]


def stream_id_from_links(value: Any) -> Any:
    """Pull the video id out of ``__links__.streams.href``.

    The href looks like ``/cms/v2/<bucket>/videos/<id>/streams``.
    """
    if value is None or isinstance(value, str):
        return value
    if not isinstance(value, dict):
        raise ValueError("expected a links object")
    streams = value.get("streams")
    if not isinstance(streams, dict):
        return None
    href = streams.get("href")
    if not isinstance(href, str):
        return None
    parts = [part for part in href.split("/") if part]
    if len(parts) >= 2 and parts[-1] == "streams":
        return parts[-2]
    return None
