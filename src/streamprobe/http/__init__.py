# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient
from .client import HttpClient, HttpClientFactory, create_default_http_client
from .headers import content_type, header_value, normalize_headers
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse, ReadLimit
from .url import is_probeable_url, path_endswith, resolve_reference

__all__ = [
    "Headers",
    "HttpClient",
    "HttpClientFactory",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "ReadLimit",
    "StubHttpClient",
    "content_type",
    "create_default_http_client",
    "header_value",
    "is_probeable_url",
    "normalize_headers",
    "path_endswith",
    "resolve_reference",
]
