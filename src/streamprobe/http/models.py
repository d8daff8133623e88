# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the probe engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import ErrorCategory

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    timeout: float | None = None
    allow_redirects: bool = True
    read_limit: int | ReadLimit = 0

    def resolve_read_limit(self, head: HttpResponse) -> int:
        limit = self.read_limit(head) if callable(self.read_limit) else self.read_limit
        return max(0, int(limit or 0))


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    ``ok`` is False only for transport failures (no status line was received).
    Faults while streaming the body after a status was received are reported
    through ``read_error`` instead, with whatever bytes arrived in ``content``.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
    read_error: str | None = None

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def status_ok(self) -> bool:
        """True for any 2xx or 3xx status."""
        return self.status_code is not None and 200 <= self.status_code <= 399


# Decides, once the status line and headers are known, how many body bytes to read.
ReadLimit = Callable[[HttpResponse], int]
