# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for streamprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .outcome import ProbeOutcome, ProbeReason
from .report import BatchReport
from .target import ProbeResult, ProbeTarget

__all__ = [
    "BatchReport",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ProbeOutcome",
    "ProbeReason",
    "ProbeResult",
    "ProbeTarget",
]
