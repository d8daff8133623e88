# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade for single probes and catalog batches."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import suppress

from .batch.runner import BatchRunner
from .catalog.base import CatalogStore
from .config import ProbeSettings, load_probe_settings
from .errors import CatalogError
from .http.client import HttpClient, HttpClientFactory, create_default_http_client
from .models.outcome import ProbeOutcome
from .models.report import BatchReport
from .models.target import ProbeTarget
from .probe.engine import ProbeEngine
from .reporting import ReportingSink


class StreamProbe:
    """
    Convenience wrapper that wires settings, client factory, catalog and sink.

    Batches always build fresh per-worker clients through ``client_factory``;
    ``probe()`` uses one lazily created client of its own.
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
        self.sink = sink
        self.client_factory = client_factory or create_default_http_client
        self._http_client: HttpClient | None = None

    @property
    def http_client(self) -> HttpClient:
        if self._http_client is None:
            self._http_client = self.client_factory(self.settings)
        return self._http_client

    def probe(self, url: str) -> ProbeOutcome:
        return ProbeEngine(self.http_client, self.settings).check(url)

    def run(self, targets: Iterable[ProbeTarget]) -> BatchReport:
        runner = BatchRunner(
            self.settings,
            catalog=self.catalog,
            sink=self.sink,
            client_factory=self.client_factory,
        )
        return runner.run(targets)

    def run_catalog(self) -> BatchReport:
        return self.run(self._require_catalog().list_targets())

    def prune_broken(self) -> int:
        catalog = self._require_catalog()
        removed = catalog.prune_broken()
        catalog.flush()
        return removed

    def _require_catalog(self) -> CatalogStore:
        if self.catalog is None:
            raise CatalogError("no catalog store configured")
        return self.catalog

    def close(self) -> None:
        with suppress(Exception):
            if self._http_client is not None:
                self._http_client.close()
        self._http_client = None

    def __enter__(self) -> StreamProbe:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
