"""Tests for the tunneling agent status client.

Uses httpx.MockTransport so no agent needs to be running.
"""

import httpx
import pytest

from tunnel_bot.exceptions import (
    StatusConnectionError,
    StatusFetchError,
    StatusPayloadError,
    StatusResponseError,
)
from tunnel_bot.tunnel.base import TunnelEndpoint
from tunnel_bot.tunnel.status_client import TunnelStatusClient

from ..fixtures import (
    TEST_ERROR_CONNECTION_REFUSED,
    TEST_PROFILE_SSH,
    TEST_PROFILE_WEB,
    TEST_PUBLIC_URL_SSH,
    TEST_PUBLIC_URL_WEB,
    TEST_STATUS_URL,
    TEST_TUNNELS_PAYLOAD,
)


def _client(handler, verbose: bool = False) -> TunnelStatusClient:
    return TunnelStatusClient(
        api_url=TEST_STATUS_URL, verbose=verbose, transport=httpx.MockTransport(handler)
    )


class TestFetchStatus:
    """Tests for TunnelStatusClient.fetch_status."""

    def test_parses_tunnels_in_order(self) -> None:
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=TEST_TUNNELS_PAYLOAD)

        endpoints = _client(handler).fetch_status()

        assert endpoints == [
            TunnelEndpoint(name=TEST_PROFILE_WEB, public_url=TEST_PUBLIC_URL_WEB, protocol="https"),
            TunnelEndpoint(name=TEST_PROFILE_SSH, public_url=TEST_PUBLIC_URL_SSH, protocol="tcp"),
        ]
        assert len(requests) == 1
        assert requests[0].method == "GET"
        assert str(requests[0].url) == TEST_STATUS_URL

    def test_empty_tunnel_list(self) -> None:
        endpoints = _client(lambda request: httpx.Response(200, json={"tunnels": []})).fetch_status()

        assert endpoints == []

    def test_unknown_fields_ignored(self) -> None:
        payload = {
            "tunnels": [{"name": "a", "public_url": "https://a.ngrok.io", "ID": "xyz"}],
            "next_page": None,
        }

        endpoints = _client(lambda request: httpx.Response(200, json=payload)).fetch_status()

        assert endpoints == [TunnelEndpoint(name="a", public_url="https://a.ngrok.io")]

    def test_connection_refused(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(TEST_ERROR_CONNECTION_REFUSED, request=request)

        with pytest.raises(StatusConnectionError) as exc_info:
            _client(handler).fetch_status()

        assert TEST_ERROR_CONNECTION_REFUSED in exc_info.value.message
        assert exc_info.value.url == TEST_STATUS_URL

    def test_timeout_is_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(StatusConnectionError):
            _client(handler).fetch_status()

    def test_non_success_status(self) -> None:
        with pytest.raises(StatusResponseError) as exc_info:
            _client(lambda request: httpx.Response(502, text="bad gateway")).fetch_status()

        assert exc_info.value.status_code == 502
        assert "502" in exc_info.value.message

    def test_invalid_json(self) -> None:
        with pytest.raises(StatusPayloadError):
            _client(lambda request: httpx.Response(200, text="<html>")).fetch_status()

    def test_invalid_utf8_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b'{"tunnels": "\x80\xff"}')

        with pytest.raises(StatusPayloadError) as exc_info:
            _client(handler).fetch_status()

        assert exc_info.value.url == TEST_STATUS_URL

    def test_invalid_utf8_body_verbose(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level("WARNING", logger="tunnel_bot")

        with pytest.raises(StatusPayloadError):
            _client(
                lambda request: httpx.Response(200, content=b"\x80\xff"), verbose=True
            ).fetch_status()

        assert "Failed to parse tunnels API response" in caplog.text

    def test_missing_tunnels_key(self) -> None:
        with pytest.raises(StatusPayloadError):
            _client(lambda request: httpx.Response(200, json={"uri": "/api"})).fetch_status()

    def test_tunnel_without_public_url(self) -> None:
        payload = {"tunnels": [{"name": TEST_PROFILE_WEB}]}

        with pytest.raises(StatusPayloadError) as exc_info:
            _client(lambda request: httpx.Response(200, json=payload)).fetch_status()

        # Multi-line validation errors are reduced to one line
        assert "\n" not in exc_info.value.message

    def test_verbose_logs_raw_body(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level("WARNING", logger="tunnel_bot")

        with pytest.raises(StatusPayloadError):
            _client(lambda request: httpx.Response(200, text="not-json"), verbose=True).fetch_status()

        assert "not-json" in caplog.text

    def test_all_failures_share_base_class(self) -> None:
        with pytest.raises(StatusFetchError):
            _client(lambda request: httpx.Response(500)).fetch_status()

    def test_each_call_issues_one_request(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        client = _client(handler)
        for _ in range(3):
            with pytest.raises(StatusResponseError):
                client.fetch_status()

        assert len(calls) == 3
