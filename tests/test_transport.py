"""Tests for HTTP transport helpers and transport error classification."""

from __future__ import annotations

import socket

import httpx
import pytest

from ddns_linode.config import LinodeConfig
from ddns_linode.models import DDNSError, ResultCode
from ddns_linode.transport import (
    USER_AGENT,
    build_http_client,
    classify_transport_error,
    get_text,
    post_form,
)


def raising_client(exc: Exception) -> httpx.Client:
    """Create a client whose every request fails with `exc`."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestClassifyTransportError:
    """Tests for classify_transport_error."""

    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectTimeout("timed out"),
            httpx.ReadTimeout("timed out"),
            httpx.PoolTimeout("timed out"),
        ],
    )
    def test_timeouts(self, exc):
        assert classify_transport_error(exc) == ResultCode.BADCONN

    def test_gaierror_cause(self):
        exc = httpx.ConnectError("connection failed")
        exc.__cause__ = socket.gaierror(-2, "Name or service not known")
        assert classify_transport_error(exc) == ResultCode.BADRESOLV

    @pytest.mark.parametrize(
        "message",
        [
            "[Errno -2] Name or service not known",
            "[Errno -3] Temporary failure in name resolution",
            "[Errno 8] nodename nor servname provided, or not known",
        ],
    )
    def test_resolver_messages(self, message):
        exc = httpx.ConnectError(message)
        assert classify_transport_error(exc) == ResultCode.BADRESOLV

    def test_connection_refused(self):
        exc = httpx.ConnectError("[Errno 111] Connection refused")
        assert classify_transport_error(exc) == ResultCode.GENERIC

    def test_unsupported_protocol(self):
        exc = httpx.UnsupportedProtocol("Request URL has an unsupported protocol 'ftp://'.")
        assert classify_transport_error(exc) == ResultCode.BADAGENT

    def test_other_errors(self):
        assert classify_transport_error(httpx.RemoteProtocolError("eof")) == ResultCode.GENERIC


class TestBuildHttpClient:
    """Tests for build_http_client."""

    def test_timeouts_and_user_agent(self):
        config = LinodeConfig(connect_timeout=2.5, timeout=7.0)
        with build_http_client(config) as client:
            assert client.timeout.connect == 2.5
            assert client.timeout.read == 7.0
            assert client.headers["User-Agent"] == USER_AGENT

    def test_injected_transport(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))
        with build_http_client(LinodeConfig(), transport=transport) as client:
            assert get_text(client, "http://ip.example.net/") == "ok"


class TestRequests:
    """Tests for post_form and get_text."""

    def test_post_form_sends_fields(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="{}")

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            response = post_form(client, "https://api.linode.com/", {"a": "1", "b": "x y"})

        assert response.status_code == 200
        assert seen[0].method == "POST"
        assert seen[0].headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert seen[0].content == b"a=1&b=x+y"

    def test_non_2xx_is_returned(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
        with httpx.Client(transport=transport) as client:
            assert get_text(client, "http://ip.example.net/") == "oops"

    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (httpx.ConnectTimeout("timed out"), ResultCode.BADCONN),
            (httpx.ConnectError("[Errno -2] Name or service not known"), ResultCode.BADRESOLV),
            (httpx.UnsupportedProtocol("unsupported protocol"), ResultCode.BADAGENT),
            (httpx.ConnectError("[Errno 111] Connection refused"), ResultCode.GENERIC),
        ],
    )
    def test_failures_become_ddns_errors(self, exc, code):
        with raising_client(exc) as client, pytest.raises(DDNSError) as exc_info:
            post_form(client, "https://api.linode.com/", {})
        assert exc_info.value.code == code
        assert exc_info.value.message.startswith("failed http request: '")
