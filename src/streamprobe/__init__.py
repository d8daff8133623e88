# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
streamprobe package entrypoint.

Concurrent liveness checks for live-TV / IPTV stream URLs. Each URL is
fetched once, its content sniffed (raw media bytes or an HLS playlist whose
first segment must answer), and the verdict is recorded through a catalog
store. HTTP behavior is abstracted behind an injectable client interface.
"""

from .batch import BatchRunner, BatchState
from .catalog import CatalogStore, JsonCatalogStore, MemoryCatalogStore
from .config import ProbeSettings, load_probe_settings
from .errors import BatchError, CatalogError, ErrorCategory, StreamProbeError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import BatchReport, ProbeOutcome, ProbeReason, ProbeResult, ProbeTarget
from .probe import ProbeEngine
from .reporting import LoggingSink, ReportingSink
from .runtime import StreamProbe
from .version import __version__

__all__ = [
    "BatchError",
    "BatchReport",
    "BatchRunner",
    "BatchState",
    "CatalogError",
    "CatalogStore",
    "ErrorCategory",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "JsonCatalogStore",
    "LoggingSink",
    "MemoryCatalogStore",
    "ProbeEngine",
    "ProbeOutcome",
    "ProbeReason",
    "ProbeResult",
    "ProbeSettings",
    "ProbeTarget",
    "ReportingSink",
    "StreamProbe",
    "StreamProbeError",
    "StubHttpClient",
    "create_default_http_client",
    "load_probe_settings",
    "setup_logging",
    "__version__",
]
