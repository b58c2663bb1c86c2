"""Tests for stream variant normalization and stream models."""

import io

import httpx
import pytest
from pydantic import ValidationError

from crunchyroll_sdk.errors import DecodeError, ExternalError
from crunchyroll_sdk.models.stream import (
    PlaybackStream,
    PlaybackVariant,
    VideoStream,
    VideoVariant,
    normalize_stream_variants,
)


def video_stream_json() -> dict:
    return {
        "media_id": "GVID1",
        "audio_locale": "ja-JP",
        "subtitles": {
            "de-DE": {"locale": "de-DE", "url": "https://subs.test/de.ass", "format": "ass"},
            "en-US": {"locale": "en-US", "url": "https://subs.test/en.ass", "format": "ass"},
        },
        "streams": {
            "adaptive_hls": {
                "": {"hardsub_locale": "", "url": "https://cdn.test/raw.m3u8"},
                "de-DE": {"hardsub_locale": "de-DE", "url": "https://cdn.test/de.m3u8"},
            },
            "download_dash": {
                "de-DE": {"hardsub_locale": "de-DE", "url": "https://cdn.test/de.mpd"},
            },
        },
    }


class TestNormalize:
    def test_regroups_by_locale(self):
        raw = {
            "adaptive_hls": {"de-DE": {"url": "a"}, "en-US": {"url": "b"}},
            "download_hls": {"de-DE": {"url": "c"}},
        }
        assert normalize_stream_variants(raw, VideoVariant) == {
            "de-DE": {"adaptive_hls": {"url": "a"}, "download_hls": {"url": "c"}},
            "en-US": {"adaptive_hls": {"url": "b"}},
        }

    def test_sentinel_locale_becomes_empty(self):
        raw = {"adaptive_hls": {":": {"url": "a"}}}
        assert normalize_stream_variants(raw, VideoVariant) == {"": {"adaptive_hls": {"url": "a"}}}

    def test_invalid_leaf_aborts(self):
        raw = {
            "adaptive_hls": {"de-DE": {"url": "a"}},
            "download_hls": {"en-US": ["not", "a", "variant"]},
        }
        with pytest.raises(DecodeError, match="download_hls"):
            normalize_stream_variants(raw, VideoVariant)

    def test_leaf_checked_against_given_variant(self):
        raw = {"adaptive_hls": {"de-DE": {"url": "a", "vcodec": 264}}}
        assert normalize_stream_variants(raw, VideoVariant)
        with pytest.raises(DecodeError):
            normalize_stream_variants(raw, PlaybackVariant)

    def test_non_map_rejected(self):
        with pytest.raises(DecodeError):
            normalize_stream_variants(["adaptive_hls"], VideoVariant)
        with pytest.raises(DecodeError):
            normalize_stream_variants({"adaptive_hls": "x"}, VideoVariant)

    def test_empty(self):
        assert normalize_stream_variants({}, VideoVariant) == {}


class TestVideoStream:
    def test_decode(self):
        stream = VideoStream.model_validate(video_stream_json())
        assert stream.media_id == "GVID1"
        assert set(stream.variants) == {"", "de-DE"}
        assert stream.variants[""].adaptive_hls.url == "https://cdn.test/raw.m3u8"
        assert stream.variants[""].download_dash is None
        assert stream.variants["de-DE"].download_dash.url == "https://cdn.test/de.mpd"
        assert stream.subtitles["en-US"].format == "ass"

    def test_sentinel_in_stream(self):
        raw = video_stream_json()
        raw["streams"] = {"adaptive_dash": {":": {"url": "https://cdn.test/raw.mpd"}}}
        stream = VideoStream.model_validate(raw)
        assert stream.variants[""].adaptive_dash.url == "https://cdn.test/raw.mpd"

    def test_invalid_leaf_fails_whole_stream(self):
        raw = video_stream_json()
        raw["streams"]["adaptive_hls"]["fr-FR"] = "broken"
        with pytest.raises(ValidationError, match="adaptive_hls"):
            VideoStream.model_validate(raw)

    def test_dump_and_validate_again(self):
        stream = VideoStream.model_validate(video_stream_json())
        restored = VideoStream.model_validate(stream.model_dump())
        assert restored.variants == stream.variants
        assert restored.subtitles == stream.subtitles

    def test_playback_dump_and_validate_again(self):
        stream = PlaybackStream.model_validate({
            "streams": {"adaptive_hls": {":": {"url": "u", "vcodec": "h264"}}},
        })
        restored = PlaybackStream.model_validate(stream.model_dump())
        assert restored.variants[""].adaptive_hls.vcodec == "h264"

    def test_executor_reaches_subtitles(self):
        executor = object()
        stream = VideoStream.model_validate(video_stream_json())
        stream.set_executor(executor)
        assert stream.get_executor() is executor
        assert all(sub.get_executor() is executor for sub in stream.subtitles.values())

    def test_playback_stream(self):
        stream = PlaybackStream.model_validate({
            "audio_locale": "ja-JP",
            "streams": {
                "adaptive_hls": {":": {"hardsub_locale": "", "url": "u", "vcodec": "h264"}},
            },
        })
        assert stream.variants[""].adaptive_hls.vcodec == "h264"
        assert stream.subtitles == {}


class TestStreamEndpoints:
    @pytest.mark.asyncio
    async def test_from_id(self, executor):
        ex, transport, calls = executor
        transport.response = httpx.Response(200, json=video_stream_json())

        stream = await VideoStream.from_id(ex, "GVID1")

        assert calls[0]["path"] == "/cms/v2/DE/M3/crunchyroll/videos/GVID1/streams"
        assert ("Signature", "sig") in calls[0]["params"]
        assert ("locale", "de-DE") in calls[0]["params"]
        assert stream.get_executor() is ex
        assert stream.subtitles["de-DE"].get_executor() is ex

    @pytest.mark.asyncio
    async def test_subtitle_write_to(self, executor):
        ex, transport, calls = executor
        transport.response = httpx.Response(200, json=video_stream_json())
        stream = await VideoStream.from_id(ex, "GVID1")

        transport.response = httpx.Response(200, content=b"[Script Info]")
        out = io.BytesIO()
        await stream.subtitles["de-DE"].write_to(out)

        assert out.getvalue() == b"[Script Info]"
        assert calls[-1]["url"] == "https://subs.test/de.ass"
        assert "authorization" not in calls[-1]["headers"]
        assert calls[0]["headers"]["authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_subtitle_write_failure(self, executor):
        ex, transport, _ = executor
        transport.response = httpx.Response(200, json=video_stream_json())
        stream = await VideoStream.from_id(ex, "GVID1")

        class Broken(io.RawIOBase):
            def write(self, b):
                raise OSError("disk full")

        transport.response = httpx.Response(200, content=b"data")
        with pytest.raises(ExternalError, match="disk full"):
            await stream.subtitles["de-DE"].write_to(Broken())
