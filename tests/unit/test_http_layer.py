# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import socket
import time

import httpx

from streamprobe.config import ProbeSettings
from streamprobe.errors import ErrorCategory
from streamprobe.http.adapters import StubHttpClient
from streamprobe.http.headers import content_type, header_value, normalize_headers
from streamprobe.http.httpx_client import HttpxClient, build_limits
from streamprobe.http.models import HttpRequest, HttpResponse
from streamprobe.http.url import is_probeable_url, path_endswith, resolve_reference
from streamprobe.probe.engine import ProbeEngine


def test_httpx_client_reads_only_up_to_limit(mock_client):
    client = mock_client(lambda request: httpx.Response(200, headers={"Content-Type": "video/mp2t"}, content=b"a" * 5000))
    resp = client.request(HttpRequest(url="http://tv.example/live", read_limit=100))
    assert resp.ok is True
    assert resp.status_code == 200
    assert resp.content == b"a" * 100
    assert resp.headers["content-type"] == "video/mp2t"


def test_httpx_client_read_limit_sees_status_and_headers(mock_client):
    seen = []

    def limit(head):
        seen.append((head.status_code, head.headers.get("content-type")))
        return 3

    client = mock_client(lambda request: httpx.Response(206, headers={"Content-Type": "audio/aac"}, content=b"abcdef"))
    resp = client.request(HttpRequest(url="http://radio.example/", read_limit=limit))
    assert seen == [(206, "audio/aac")]
    assert resp.content == b"abc"


def test_httpx_client_zero_limit_skips_body(mock_client):
    client = mock_client(lambda request: httpx.Response(200, content=b"payload"))
    resp = client.request(HttpRequest(url="http://tv.example/", method="HEAD"))
    assert resp.content == b""
    assert resp.read_error is None


def test_httpx_client_sets_default_user_agent_and_timeout(mock_client, settings):
    captured = {}

    def handler(request):
        captured["ua"] = request.headers.get("user-agent")
        captured["timeout"] = request.extensions.get("timeout")
        return httpx.Response(204)

    client = mock_client(handler)
    resp = client.request(HttpRequest(url="http://tv.example/", timeout=1.5))
    assert resp.status_code == 204
    assert captured["ua"] == settings.user_agent
    assert captured["timeout"]["read"] == 1.5


def test_httpx_client_transport_error_is_not_ok(mock_client):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    resp = mock_client(handler).request(HttpRequest(url="http://tv.example/"))
    assert resp.ok is False
    assert resp.status_code is None
    assert resp.error_type == "ConnectError"
    assert resp.error_category is ErrorCategory.CONNECTION_ERROR


def test_httpx_client_invalid_scheme_is_invalid_request():
    client = HttpxClient(ProbeSettings())
    try:
        resp = client.request(HttpRequest(url="rtmp://tv.example/live"))
    finally:
        client.close()
    assert resp.ok is False
    assert resp.error_category is ErrorCategory.INVALID_REQUEST


def test_build_limits_maps_pool_settings():
    limits = build_limits(ProbeSettings(max_idle_connections=7, idle_timeout=12.0))
    assert limits.max_keepalive_connections == 7
    assert limits.keepalive_expiry == 12.0


def test_stub_http_client_applies_read_limit_and_method_keys():
    stub = StubHttpClient()
    stub.add("http://tv.example/a", HttpResponse(ok=True, status_code=200, content=b"0123456789"))
    stub.add("http://tv.example/a", HttpResponse(ok=True, status_code=405), method="HEAD")

    got = stub.request(HttpRequest(url="http://tv.example/a", read_limit=4))
    assert got.content == b"0123"
    assert got.url == "http://tv.example/a"
    assert stub.request(HttpRequest(url="http://tv.example/a", method="HEAD")).status_code == 405

    missing = stub.request(HttpRequest(url="http://missing"))
    assert missing.ok is False
    assert len(stub.requests) == 3
    stub.close()
    assert stub.closed is True


def test_status_ok_range():
    assert HttpResponse(ok=True, status_code=200).status_ok is True
    assert HttpResponse(ok=True, status_code=399).status_ok is True
    assert HttpResponse(ok=True, status_code=400).status_ok is False
    assert HttpResponse(ok=True, status_code=199).status_ok is False
    assert HttpResponse(ok=False).status_ok is False


def test_header_helpers_are_case_insensitive():
    headers = normalize_headers(httpx.Headers({"Content-Type": "Application/VND.Apple.MPEGURL; charset=utf-8"}))
    assert "content-type" in headers
    assert content_type(headers) == "application/vnd.apple.mpegurl; charset=utf-8"
    assert header_value({"X-Token": " abc "}, "x-token") == "abc"
    assert header_value({}, "content-type", "none") == "none"
    assert normalize_headers([("A", None)]) == {"a": ""}


def test_url_helpers():
    assert is_probeable_url("https://cdn.example/live.m3u8")
    assert not is_probeable_url("//cdn.example/live.m3u8")
    assert path_endswith("http://cdn.example/live.M3U8?token=1", (".m3u8",))
    assert resolve_reference("http://cdn.example/a/b/index.m3u8", "seg.ts") == "http://cdn.example/a/b/seg.ts"
    assert resolve_reference("http://cdn.example/a/index.m3u8", "/root/seg.ts") == "http://cdn.example/root/seg.ts"
    assert resolve_reference("https://cdn.example/a/index.m3u8", "//edge.example/seg.ts") == "https://edge.example/seg.ts"
    assert resolve_reference("http://cdn.example/a/index.m3u8", "http://other/seg.ts") == "http://other/seg.ts"


def test_nested_dns_failure_is_categorized(mock_client, settings):
    def handler(request):
        try:
            try:
                raise socket.gaierror(-2, "Name or service not known")
            except socket.gaierror as exc:
                raise RuntimeError("connection pool wrapper") from exc
        except RuntimeError as exc:
            raise httpx.ConnectError("[Errno -2] Name or service not known", request=request) from exc

    client = mock_client(handler)
    resp = client.request(HttpRequest(url="http://nonexistent-host.invalid/live"))
    assert resp.error_category is ErrorCategory.DNS_ERROR

    outcome = ProbeEngine(client, settings).check("http://nonexistent-host.invalid/live")
    assert outcome.detail == "DNS_ERROR"


def test_slow_headers_are_cut_at_the_deadline(trickle_server):
    url = trickle_server(b"HTTP/1.1 200 OK\r\n", [bytes([b]) for b in b"Content-Type: video/mp2t\r\nX-Pad: " + b"a" * 60], 0.3)
    client = HttpxClient(ProbeSettings(timeout=1.0))
    try:
        started = time.monotonic()
        resp = client.request(HttpRequest(url=url, timeout=1.0))
        elapsed = time.monotonic() - started
    finally:
        client.close()
    assert resp.ok is False
    assert resp.error_category is ErrorCategory.TIMEOUT
    assert elapsed < 1.6


def test_slow_body_is_cut_at_the_deadline(trickle_server):
    head = b"HTTP/1.1 200 OK\r\nContent-Type: video/mp2t\r\nTransfer-Encoding: chunked\r\n\r\n"
    url = trickle_server(head, [b"1\r\nG\r\n"] * 20, 0.4)
    client = HttpxClient(ProbeSettings(timeout=1.0))
    try:
        started = time.monotonic()
        resp = client.request(HttpRequest(url=url, timeout=1.0, read_limit=10))
        elapsed = time.monotonic() - started
    finally:
        client.close()
    assert resp.ok is True
    assert resp.status_code == 200
    assert resp.read_error is not None
    assert "deadline exceeded" in resp.read_error
    assert len(resp.content) < 10
    assert elapsed < 1.6
