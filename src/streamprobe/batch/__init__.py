# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Concurrent batch probing: dispatcher, worker pool and result collector."""

from .channel import ClosableQueue
from .collector import ResultCollector
from .dispatcher import Dispatcher
from .runner import BatchRunner, BatchState
from .workers import ProbeWorker, WorkerPool

__all__ = [
    "BatchRunner",
    "BatchState",
    "ClosableQueue",
    "Dispatcher",
    "ProbeWorker",
    "ResultCollector",
    "WorkerPool",
]
