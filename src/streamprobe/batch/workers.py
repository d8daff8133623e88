# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fixed pool of probing threads, each owning a private HTTP client."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import suppress

from ..config import ProbeSettings, load_probe_settings
from ..errors import BatchError
from ..http.client import HttpClient, HttpClientFactory, create_default_http_client
from ..models.outcome import ProbeOutcome, ProbeReason
from ..models.target import ProbeResult, ProbeTarget
from ..probe.engine import ProbeEngine
from .channel import ClosableQueue

logger = logging.getLogger(__name__)


class ProbeWorker(threading.Thread):
    """Pulls targets until the work queue is closed and drained."""

    def __init__(
        self,
        index: int,
        http_client: HttpClient,
        work_queue: ClosableQueue[ProbeTarget],
        results: ClosableQueue[ProbeResult],
        settings: ProbeSettings,
    ):
        super().__init__(name=f"streamprobe-worker-{index}", daemon=True)
        self.http_client = http_client
        self.work_queue = work_queue
        self.results = results
        self.settings = settings
        self.processed = 0

    def run(self) -> None:
        engine = ProbeEngine(self.http_client, self.settings)
        try:
            for target in self.work_queue:
                self.results.put(self.probe(engine, target))
                self.processed += 1
        finally:
            with suppress(Exception):
                self.http_client.close()
        logger.debug("%s exiting after %d targets", self.name, self.processed)

    def probe(self, engine: ProbeEngine, target: ProbeTarget) -> ProbeResult:
        started = time.monotonic()
        try:
            outcome = engine.check(target.url, self.settings.timeout)
        except Exception as exc:  # noqa: BLE001
            # One misbehaving target must still yield exactly one result.
            logger.exception("Probe of %s raised", target.url)
            outcome = ProbeOutcome.failed(ProbeReason.REQUEST_ERROR, detail=type(exc).__name__)
        result = ProbeResult.from_outcome(target, outcome, elapsed=time.monotonic() - started)
        logger.debug("%s -> %s (%.2fs)", target.url, result.label, result.elapsed)
        return result


class WorkerPool:
    """
    Runs ``worker_count`` ProbeWorkers against shared queues.

    Clients are allocated up front, before any thread starts, so a failure to
    build one aborts the batch without leaving half a pool running.
    """

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        client_factory: HttpClientFactory | None = None,
        *,
        worker_count: int | None = None,
    ):
        self.settings = settings or load_probe_settings()
        self.client_factory = client_factory or create_default_http_client
        self.worker_count = max(1, worker_count if worker_count is not None else self.settings.workers)
        self.workers: list[ProbeWorker] = []

    def allocate_clients(self) -> list[HttpClient]:
        clients: list[HttpClient] = []
        try:
            for _ in range(self.worker_count):
                clients.append(self.client_factory(self.settings))
        except Exception as exc:
            for client in clients:
                with suppress(Exception):
                    client.close()
            raise BatchError(f"could not create HTTP client {len(clients) + 1}/{self.worker_count}: {exc}") from exc
        return clients

    def start(
        self,
        clients: list[HttpClient],
        work_queue: ClosableQueue[ProbeTarget],
        results: ClosableQueue[ProbeResult],
    ) -> threading.Thread:
        """Start the workers and a supervisor that closes ``results`` once all of them exit."""
        self.workers = [
            ProbeWorker(index, client, work_queue, results, self.settings) for index, client in enumerate(clients)
        ]
        for worker in self.workers:
            worker.start()

        supervisor = threading.Thread(
            target=self._supervise, args=(results,), name="streamprobe-supervisor", daemon=True
        )
        supervisor.start()
        return supervisor

    def _supervise(self, results: ClosableQueue[ProbeResult]) -> None:
        try:
            for worker in self.workers:
                worker.join()
        finally:
            results.close()


__all__ = ["ProbeWorker", "WorkerPool"]
