# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single consumer of the result stream."""

from __future__ import annotations

import logging

from ..catalog.base import CatalogStore
from ..models.report import BatchReport
from ..models.target import ProbeResult
from ..reporting import LoggingSink, ReportingSink
from .channel import ClosableQueue

logger = logging.getLogger(__name__)


class ResultCollector:
    """
    Drains results until the stream closes, persisting and tallying each one.

    Persistence is best effort: a failed catalog write is logged and counted
    but the result still counts as working or broken.
    """

    def __init__(self, catalog: CatalogStore | None = None, sink: ReportingSink | None = None):
        self.catalog = catalog
        self.sink = sink or LoggingSink()

    def collect(self, results: ClosableQueue[ProbeResult]) -> BatchReport:
        report = BatchReport()
        for result in results:
            self._persist(result, report)
            report.add(result)
            self.sink.on_result(result)
        return report

    def _persist(self, result: ProbeResult, report: BatchReport) -> None:
        if self.catalog is None:
            return
        try:
            self.catalog.set_working(result.target_id, result.works)
        except Exception as exc:  # noqa: BLE001
            report.persist_failures += 1
            logger.warning("Failed to update target %s: %s", result.target_id, exc)


__all__ = ["ResultCollector"]
