"""Unit tests for error classes."""

from __future__ import annotations

import httpx
import pytest

from crunchyroll_sdk.errors import (
    CrunchyrollError,
    DecodeError,
    ExternalError,
    InputError,
    InternalError,
    NetworkError,
    RequestError,
)


class TestRequestError:
    def test_from_response(self):
        response = httpx.Response(403, json={"message": "Not allowed"})
        err = RequestError.from_response(response)
        assert err.status == 403
        assert err.response is response
        assert str(err) == "[403] Not allowed"

    def test_from_response_error_key(self):
        response = httpx.Response(401, json={"error": "invalid_grant"})
        err = RequestError.from_response(response)
        assert "invalid_grant" in str(err)

    def test_from_response_no_body(self):
        """Handle non-JSON error body gracefully."""
        response = httpx.Response(500, text="Internal Server Error")
        err = RequestError.from_response(response)
        assert err.status == 500
        assert str(err) == "[500] HTTP 500"
        assert err.body == "Internal Server Error"

    def test_without_response(self):
        err = RequestError("no playback id available")
        assert err.status is None
        assert err.body == ""


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls", [DecodeError, InputError, InternalError, ExternalError, RequestError]
    )
    def test_all_are_crunchyroll_errors(self, cls):
        err = cls("boom")
        assert isinstance(err, CrunchyrollError)
        assert err.message == "boom"

    def test_decode_error_is_value_error(self):
        assert isinstance(DecodeError("bad"), ValueError)

    def test_network_error_is_request_error(self):
        err = NetworkError("Connection refused")
        assert isinstance(err, RequestError)
        assert str(err) == "Connection refused"
