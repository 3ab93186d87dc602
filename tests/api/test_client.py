"""Tests for the httpx backed client."""

import httpx
import msgspec
import pytest

from bibadd.api.client import DEFAULT_USER_AGENT, HttpClient
from bibadd.exceptions import BibaddError, ErrorKind


class Payload(msgspec.Struct):
    name: str


def client_for(handler) -> HttpClient:
    return HttpClient(transport=httpx.MockTransport(handler))


class TestGetText:
    """Test fetching text bodies."""

    def test_returns_body_and_sends_user_agent(self) -> None:
        """The body is returned and the client identifies itself."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["agent"] = request.headers["User-Agent"]
            return httpx.Response(200, text="@misc{a, title={A}}")

        with client_for(handler) as client:
            assert client.get_text("https://example.org/a") == "@misc{a, title={A}}"

        assert seen["agent"] == DEFAULT_USER_AGENT

    def test_status_error_is_io(self) -> None:
        """Error statuses become IO errors naming the status."""
        client = client_for(lambda request: httpx.Response(404))

        with pytest.raises(BibaddError) as excinfo:
            client.get_text("https://example.org/missing")

        assert excinfo.value.kind is ErrorKind.IO
        assert "404" in str(excinfo.value)

    def test_transport_error_is_io(self) -> None:
        """Connection failures become IO errors."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(BibaddError) as excinfo:
            client_for(handler).get_text("https://example.org/")

        assert excinfo.value.kind is ErrorKind.IO
        assert isinstance(excinfo.value.__cause__, httpx.ConnectError)

    def test_empty_body_is_no_value(self) -> None:
        """An empty response has no value to offer."""
        client = client_for(lambda request: httpx.Response(200, text=""))

        with pytest.raises(BibaddError) as excinfo:
            client.get_text("https://example.org/")

        assert excinfo.value.kind is ErrorKind.NO_VALUE


class TestGetJson:
    """Test decoding JSON bodies."""

    def test_decodes_into_type(self) -> None:
        """Bodies are decoded into the requested struct."""
        client = client_for(
            lambda request: httpx.Response(200, json={"name": "x", "extra": 1})
        )

        assert client.get_json("https://example.org/", Payload) == Payload("x")

    def test_shape_mismatch_is_deserialize(self) -> None:
        """Bodies of the wrong shape are deserialize errors."""
        client = client_for(lambda request: httpx.Response(200, json={"other": 1}))

        with pytest.raises(BibaddError) as excinfo:
            client.get_json("https://example.org/", Payload)

        assert excinfo.value.kind is ErrorKind.DESERIALIZE
        assert "Unexpected response format" in str(excinfo.value)

    def test_invalid_json_is_deserialize(self) -> None:
        """Bodies that are not JSON are deserialize errors."""
        client = client_for(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(BibaddError) as excinfo:
            client.get_json("https://example.org/", Payload)

        assert excinfo.value.kind is ErrorKind.DESERIALIZE
