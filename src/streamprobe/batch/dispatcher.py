# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Feeds targets into the work queue."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from ..models.target import ProbeTarget
from .channel import ClosableQueue

logger = logging.getLogger(__name__)


class Dispatcher:
    """Publishes targets in input order, then closes the queue. Does not deduplicate."""

    def __init__(self, work_queue: ClosableQueue[ProbeTarget]):
        self.work_queue = work_queue
        self.dispatched = 0

    def dispatch(self, targets: Iterable[ProbeTarget]) -> int:
        try:
            for target in targets:
                if not self.work_queue.put(target):
                    logger.info("Work queue closed early; %d targets dispatched", self.dispatched)
                    break
                self.dispatched += 1
        finally:
            self.work_queue.close()
        return self.dispatched

    def start(self, targets: Iterable[ProbeTarget]) -> threading.Thread:
        thread = threading.Thread(target=self.dispatch, args=(targets,), name="streamprobe-dispatcher", daemon=True)
        thread.start()
        return thread


__all__ = ["Dispatcher"]
