# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import socket
import threading
import time
import weakref
from contextlib import suppress
from typing import Any

import httpx

from ..config import ProbeSettings, load_probe_settings
from ..errors import ErrorCategory, categorize_exception
from .client import HttpClient
from .headers import normalize_headers
from .models import HttpRequest, HttpResponse

DEADLINE_MESSAGE = "deadline exceeded"

# Trace events whose return value is the network stream a request runs on.
_STREAM_EVENTS = ("connection.connect_tcp.complete", "connection.start_tls.complete")


def build_limits(settings: ProbeSettings) -> httpx.Limits:
    """Connection-pool limits for one worker's client."""
    return httpx.Limits(
        max_keepalive_connections=settings.max_idle_connections,
        keepalive_expiry=settings.idle_timeout,
    )


def _shutdown_stream(stream: Any) -> None:
    sock = stream.get_extra_info("socket")
    if sock is None:
        return
    # socket.socket.shutdown on the raw fd also works for SSL sockets without touching TLS state.
    with suppress(OSError, ValueError):
        socket.socket.shutdown(sock, socket.SHUT_RDWR)


class _Deadline:
    """
    Wall-clock bound for one request.

    httpx only times individual socket operations, so a server that trickles
    bytes never trips them. When the timer fires, the sockets the request runs
    on are shut down, which wakes any blocked read. Streams opened by this
    request are captured through httpx's ``trace`` extension. A request that
    reused a pooled connection opened none, so every stream the client ever
    opened is shut down instead (a client serves one request at a time).
    """

    def __init__(self, timeout: float, known_streams: weakref.WeakSet):
        self.expires_at = time.monotonic() + timeout
        self.fired = False
        self._known = known_streams
        self._streams: list[Any] = []
        self._lock = threading.Lock()
        self._done = False
        self._timer = threading.Timer(timeout, self._expire)
        self._timer.daemon = True

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._done = True
        self._timer.cancel()

    def trace(self, event_name: str, info: dict[str, Any]) -> None:
        if event_name not in _STREAM_EVENTS:
            return
        stream = info.get("return_value")
        if stream is None:
            return
        with self._lock:
            self._streams.append(stream)
            with suppress(TypeError):
                self._known.add(stream)
            expired = self.fired
        if expired:
            _shutdown_stream(stream)

    def _expire(self) -> None:
        with self._lock:
            if self._done:
                return
            self.fired = True
            streams = list(self._streams) or list(self._known)
        for stream in reversed(streams):
            _shutdown_stream(stream)


class HttpxClient(HttpClient):
    """
    Synchronous httpx client wrapper.

    The response body is streamed and only as many bytes as the request's
    read limit asks for are pulled off the socket, so probing an endless live
    stream costs a handful of bytes rather than the whole stream. Each request
    is bounded by its timeout as a whole, headers and body included.
    """

    def __init__(self, settings: ProbeSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_probe_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
            limits=build_limits(self.settings),
        )
        self._streams: weakref.WeakSet = weakref.WeakSet()

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        deadline = _Deadline(timeout, self._streams)
        response: HttpResponse | None = None

        deadline.start()
        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
                extensions={"trace": deadline.trace},
            ) as resp:
                response = HttpResponse(
                    ok=True,
                    status_code=resp.status_code,
                    headers=normalize_headers(resp.headers),
                    url=str(resp.url),
                )
                limit = request.resolve_read_limit(response)
                if limit > 0:
                    self._read_body(resp, response, limit, deadline)
            return response
        except Exception as exc:  # noqa: BLE001
            if response is not None:
                # Status and headers arrived; the fault happened while releasing the body.
                if response.read_error is None:
                    response.read_error = f"{type(exc).__name__}: {exc}"
                return response
            if deadline.fired:
                return HttpResponse(
                    ok=False,
                    error_message=f"{DEADLINE_MESSAGE} before response headers ({timeout:g}s)",
                    error_type=type(exc).__name__,
                    error_category=ErrorCategory.TIMEOUT,
                    url=request.url,
                )
            return HttpResponse(
                ok=False,
                error_message=str(exc),
                error_type=type(exc).__name__,
                error_category=categorize_exception(exc),
                url=request.url,
            )
        finally:
            deadline.cancel()

    @staticmethod
    def _read_body(resp: httpx.Response, response: HttpResponse, limit: int, deadline: _Deadline) -> None:
        content = bytearray()
        try:
            for chunk in resp.iter_bytes():
                if not chunk:
                    continue
                remaining = limit - len(content)
                if len(chunk) >= remaining:
                    content.extend(chunk[:remaining])
                    break
                content.extend(chunk)
                if time.monotonic() >= deadline.expires_at:
                    response.read_error = f"{DEADLINE_MESSAGE} while reading body"
                    break
        except (httpx.HTTPError, httpx.StreamError, OSError) as exc:
            if deadline.fired:
                response.read_error = f"{DEADLINE_MESSAGE} while reading body"
            else:
                response.read_error = f"{type(exc).__name__}: {exc}"

        response.content = bytes(content)

    def close(self) -> None:
        self._client.close()
