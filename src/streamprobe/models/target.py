# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Batch input and output records."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

from .outcome import ProbeOutcome, ProbeReason


@dataclass(frozen=True)
class ProbeTarget:
    id: Hashable
    url: str


@dataclass(frozen=True)
class ProbeResult:
    target_id: Hashable
    url: str
    works: bool
    reason: ProbeReason
    status_code: int | None = None
    detail: str | None = None
    elapsed: float = 0.0

    @property
    def label(self) -> str:
        return ProbeOutcome(self.works, self.reason, self.status_code).label

    @classmethod
    def from_outcome(cls, target: ProbeTarget, outcome: ProbeOutcome, *, elapsed: float = 0.0) -> ProbeResult:
        return cls(
            target_id=target.id,
            url=target.url,
            works=outcome.works,
            reason=outcome.reason,
            status_code=outcome.status_code,
            detail=outcome.detail,
            elapsed=elapsed,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.target_id,
            "url": self.url,
            "works": self.works,
            "reason": self.label,
            "detail": self.detail,
            "elapsed": round(self.elapsed, 3),
        }
