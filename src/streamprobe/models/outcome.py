# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProbeReason(str, Enum):
    OK = "ok"
    REQUEST_ERROR = "request error"
    CONNECTION_ERROR = "connection error"
    STATUS = "status"
    INVALID_TYPE = "invalid type"
    NO_DATA = "no data"
    READ_ERROR = "read error"
    INVALID_M3U8 = "invalid m3u8"
    NO_SEGMENTS = "no segments"
    SEGMENTS_BROKEN = "segments broken"


@dataclass(frozen=True)
class ProbeOutcome:
    """What the probe engine concluded about one URL."""

    works: bool
    reason: ProbeReason
    status_code: int | None = None
    detail: str | None = None

    @property
    def label(self) -> str:
        """Human-readable reason, e.g. ``"ok"`` or ``"status 404"``."""
        if self.reason is ProbeReason.STATUS:
            return f"status {self.status_code}"
        return self.reason.value

    @classmethod
    def ok(cls) -> ProbeOutcome:
        return cls(works=True, reason=ProbeReason.OK)

    @classmethod
    def failed(cls, reason: ProbeReason, *, status_code: int | None = None, detail: str | None = None) -> ProbeOutcome:
        return cls(works=False, reason=reason, status_code=status_code, detail=detail)
