"""Video and playback streams.

The API keys stream variants as ``format -> hardsub locale -> variant``. The
models here expose them the other way around, ``hardsub locale -> formats``,
which is how callers pick a stream. The empty locale ``""`` holds the
variants without hardsub.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import IO, TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError, model_validator

from crunchyroll_sdk.errors import DecodeError, ExternalError, InternalError
from crunchyroll_sdk.models.base import CrunchyModel, ExecutorModel

if TYPE_CHECKING:
    from crunchyroll_sdk.executor import Executor

HARDSUB_SENTINEL = ":"


def normalize_stream_variants(
    raw: Any, variant_model: type[BaseModel]
) -> dict[str, dict[str, Any]]:
    """Regroup ``{format: {locale: payload}}`` into ``{locale: {format: payload}}``.

    Every payload is validated against ``variant_model`` first; the first one
    that does not fit aborts the whole conversion with :class:`DecodeError`.
    """
    if not isinstance(raw, Mapping):
        raise DecodeError(f"expected a map of stream formats, got {type(raw).__name__}")

    normalized: dict[str, dict[str, Any]] = {}
    for format_name, by_locale in raw.items():
        if not isinstance(by_locale, Mapping):
            raise DecodeError(
                f"expected a map of locales for stream format '{format_name}', "
                f"got {type(by_locale).__name__}"
            )
        for locale, payload in by_locale.items():
            if locale == HARDSUB_SENTINEL:
                locale = ""
            try:
                variant_model.model_validate(payload)
            except ValidationError as exc:
                raise DecodeError(
                    f"invalid '{format_name}' stream variant for locale '{locale}': {exc}"
                ) from exc
            normalized.setdefault(locale, {})[format_name] = payload
    return normalized


def _regroup_streams(data: Any, variant_model: type[BaseModel]) -> Any:
    # Only the wire key ``streams`` is keyed by format; ``variants`` is already
    # keyed by locale.
    if isinstance(data, Mapping) and "streams" in data:
        data = dict(data)
        data["variants"] = normalize_stream_variants(data.pop("streams"), variant_model)
    return data


class StreamSubtitle(ExecutorModel):
    locale: str = ""
    url: str = ""
    format: str = ""

    async def write_to(self, fp: IO[bytes]) -> None:
        """Download the subtitle and write it to ``fp``."""
        executor = self.get_executor()
        if executor is None:
            raise InternalError("subtitle has no executor attached")
        response = await executor.http.get(self.url, auth=False)
        try:
            fp.write(response.content)
        except OSError as exc:
            raise ExternalError(str(exc)) from exc


class VideoVariant(CrunchyModel):
    hardsub_locale: str = ""
    url: str = ""


class PlaybackVariant(CrunchyModel):
    hardsub_locale: str = ""
    url: str = ""
    vcodec: str = ""


class VideoVariants(CrunchyModel):
    adaptive_dash: VideoVariant | None = None
    adaptive_hls: VideoVariant | None = None
    download_dash: VideoVariant | None = None
    download_hls: VideoVariant | None = None
    drm_adaptive_dash: VideoVariant | None = None
    drm_adaptive_hls: VideoVariant | None = None
    drm_download_dash: VideoVariant | None = None
    drm_download_hls: VideoVariant | None = None
    drm_multitrack_adaptive_hls_v2: VideoVariant | None = None
    multitrack_adaptive_hls_v2: VideoVariant | None = None
    vo_adaptive_dash: VideoVariant | None = None
    vo_adaptive_hls: VideoVariant | None = None
    vo_drm_adaptive_dash: VideoVariant | None = None
    vo_drm_adaptive_hls: VideoVariant | None = None


class PlaybackVariants(CrunchyModel):
    adaptive_dash: PlaybackVariant | None = None
    adaptive_hls: PlaybackVariant | None = None
    download_hls: PlaybackVariant | None = None
    drm_adaptive_dash: PlaybackVariant | None = None
    drm_adaptive_hls: PlaybackVariant | None = None
    drm_download_hls: PlaybackVariant | None = None
    trailer_dash: PlaybackVariant | None = None
    trailer_hls: PlaybackVariant | None = None
    vo_adaptive_dash: PlaybackVariant | None = None
    vo_adaptive_hls: PlaybackVariant | None = None
    vo_drm_adaptive_dash: PlaybackVariant | None = None
    vo_drm_adaptive_hls: PlaybackVariant | None = None


class VideoStream(ExecutorModel):
    """A video stream with every delivery variant, keyed by hardsub locale."""

    executor_fields = ("subtitles",)

    media_id: str = ""
    audio_locale: str = ""
    subtitles: dict[str, StreamSubtitle] = {}
    variants: dict[str, VideoVariants] = {}

    @model_validator(mode="before")
    @classmethod
    def _normalize_variants(cls, data: Any) -> Any:
        return _regroup_streams(data, VideoVariant)

    @classmethod
    async def from_id(cls, executor: Executor, id: str) -> VideoStream:
        endpoint = f"/cms/v2/{executor.details.bucket}/videos/{id}/streams"
        return await (
            executor.get(endpoint)
            .apply_media_query()
            .apply_locale_query()
            .request(cls)
        )


class PlaybackStream(ExecutorModel):
    executor_fields = ("subtitles",)

    audio_locale: str = ""
    subtitles: dict[str, StreamSubtitle] = {}
    variants: dict[str, PlaybackVariants] = {}

    @model_validator(mode="before")
    @classmethod
    def _normalize_variants(cls, data: Any) -> Any:
        return _regroup_streams(data, PlaybackVariant)
