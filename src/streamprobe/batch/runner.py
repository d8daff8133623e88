# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Wires dispatcher, worker pool and collector into one batch run."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from enum import Enum

from ..catalog.base import CatalogStore
from ..config import ProbeSettings, load_probe_settings
from ..errors import BatchError
from ..http.client import HttpClientFactory, create_default_http_client
from ..models.report import BatchReport
from ..models.target import ProbeResult, ProbeTarget
from ..reporting import LoggingSink, ReportingSink
from .channel import ClosableQueue
from .collector import ResultCollector
from .dispatcher import Dispatcher
from .workers import WorkerPool

logger = logging.getLogger(__name__)


class BatchState(str, Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    PROBING = "probing"
    COLLECTING = "collecting"
    DONE = "done"
    FAILED = "failed"


class BatchRunner:
    """
    Probes a set of targets once.

    ``run`` returns after every dispatched target produced exactly one result,
    each result went through the catalog, and the catalog was flushed.
    A runner is single-use.
    """

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        *,
        catalog: CatalogStore | None = None,
        sink: ReportingSink | None = None,
        client_factory: HttpClientFactory | None = None,
    ):
        self.settings = settings or load_probe_settings()
        self.catalog = catalog
        self.sink = sink or LoggingSink()
        self.client_factory = client_factory or create_default_http_client
        self.state = BatchState.IDLE
        self.dispatched = 0
        self._work_queue: ClosableQueue[ProbeTarget] | None = None

    def run(self, targets: Iterable[ProbeTarget]) -> BatchReport:
        if self.state is not BatchState.IDLE:
            raise BatchError(f"batch already {self.state.value}; create a new BatchRunner")

        batch = list(targets)
        started = time.monotonic()
        pool = WorkerPool(self.settings, self.client_factory, worker_count=min(self.settings.workers, len(batch)))
        try:
            clients = pool.allocate_clients()
        except BatchError:
            self.state = BatchState.FAILED
            raise

        work_queue: ClosableQueue[ProbeTarget] = ClosableQueue()
        results: ClosableQueue[ProbeResult] = ClosableQueue()
        self._work_queue = work_queue
        logger.info(
            "Starting validation of %d targets (workers=%d, timeout=%.1fs)",
            len(batch),
            pool.worker_count,
            self.settings.timeout,
        )

        self.state = BatchState.DISPATCHING
        dispatcher = Dispatcher(work_queue)
        dispatch_thread = dispatcher.start(batch)

        self.state = BatchState.PROBING
        supervisor = pool.start(clients, work_queue, results)

        self.state = BatchState.COLLECTING
        report = ResultCollector(self.catalog, self.sink).collect(results)
        dispatch_thread.join()
        supervisor.join()
        self.dispatched = dispatcher.dispatched

        if self.catalog is not None:
            try:
                self.catalog.flush()
            except Exception:
                self.state = BatchState.FAILED
                raise

        report.elapsed = time.monotonic() - started
        self.state = BatchState.DONE
        self.sink.on_complete(report)
        logger.info("Done in %.1fs: %d working, %d broken", report.elapsed, report.working, report.broken)
        return report

    def abort(self) -> int:
        """
        Stop handing out targets. Targets no worker has taken yet produce no result.

        Returns the number of targets dropped.
        """
        if self._work_queue is None:
            return 0
        dropped = self._work_queue.discard_pending()
        logger.warning("Batch aborted; %d queued targets dropped", dropped)
        return dropped


__all__ = ["BatchRunner", "BatchState"]
