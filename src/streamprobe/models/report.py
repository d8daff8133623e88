# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Batch summary."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from .target import ProbeResult


@dataclass
class BatchReport:
    working: int = 0
    broken: int = 0
    results: list[ProbeResult] = field(default_factory=list)
    persist_failures: int = 0
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return self.working + self.broken

    def add(self, result: ProbeResult) -> None:
        self.results.append(result)
        if result.works:
            self.working += 1
        else:
            self.broken += 1

    def reason_counts(self) -> dict[str, int]:
        """Number of broken targets per failure reason, most common first."""
        counts = Counter(result.label for result in self.results if not result.works)
        return dict(counts.most_common())

    def to_dict(self) -> dict[str, Any]:
        return {
            "working": self.working,
            "broken": self.broken,
            "total": self.total,
            "persist_failures": self.persist_failures,
            "elapsed": round(self.elapsed, 3),
            "reasons": self.reason_counts(),
            "results": [result.to_dict() for result in self.results],
        }
