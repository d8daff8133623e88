# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Progress and summary sinks notified by the result collector."""

from __future__ import annotations

import logging
from typing import Protocol

from .models.report import BatchReport
from .models.target import ProbeResult

logger = logging.getLogger(__name__)


class ReportingSink(Protocol):
    def on_result(self, result: ProbeResult) -> None: ...

    def on_complete(self, report: BatchReport) -> None: ...


class LoggingSink:
    """Default sink: one INFO line per target and a summary line."""

    def on_result(self, result: ProbeResult) -> None:
        logger.info("%s %s: %s", "OK" if result.works else "BROKEN", result.url, result.label)

    def on_complete(self, report: BatchReport) -> None:
        logger.info(
            "Batch finished in %.1fs: %d working, %d broken", report.elapsed, report.working, report.broken
        )


__all__ = ["LoggingSink", "ReportingSink"]
