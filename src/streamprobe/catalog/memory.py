# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory catalog store."""

from __future__ import annotations

from collections.abc import Hashable, Iterable

from ..errors import CatalogError
from ..models.target import ProbeTarget


class MemoryCatalogStore:
    def __init__(self, targets: Iterable[ProbeTarget] = ()):
        self._targets: dict[Hashable, ProbeTarget] = {}
        self.working: dict[Hashable, bool] = {}
        for target in targets:
            self._targets[target.id] = target

    def list_targets(self) -> list[ProbeTarget]:
        return [target for target in self._targets.values() if target.url]

    def set_working(self, target_id: Hashable, works: bool) -> None:
        if target_id not in self._targets:
            raise CatalogError(f"unknown target {target_id!r}")
        self.working[target_id] = works

    def prune_broken(self) -> int:
        broken = [target_id for target_id, works in self.working.items() if not works]
        for target_id in broken:
            self._targets.pop(target_id, None)
            self.working.pop(target_id, None)
        return len(broken)

    def flush(self) -> None:
        return None
