# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

from dataclasses import replace

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests and dry runs.

    Responses are keyed by ``(method, url)`` with a fallback on the bare URL.
    The configured body is cut to the request's read limit the same way the
    httpx client stops reading the socket.
    """

    def __init__(self, responses: dict[object, HttpResponse] | None = None):
        self._responses = dict(responses or {})
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse, *, method: str | None = None) -> None:
        self._responses[(method.upper(), url) if method else url] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        configured = self._responses.get((request.method.upper(), request.url), self._responses.get(request.url))
        if configured is None:
            return HttpResponse(ok=False, error_message="No stubbed response configured", error_type="LookupError")
        if not configured.ok:
            return configured

        limit = request.resolve_read_limit(configured)
        content = configured.content[:limit]
        return replace(configured, content=content, url=configured.url or request.url)

    def close(self) -> None:
        self.closed = True
