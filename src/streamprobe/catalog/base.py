# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Catalog store contract."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol

from ..models.target import ProbeTarget


class CatalogStore(Protocol):
    """Supplies probe targets and records whether each one works."""

    def list_targets(self) -> list[ProbeTarget]: ...

    def set_working(self, target_id: Hashable, works: bool) -> None: ...

    def prune_broken(self) -> int: ...

    def flush(self) -> None: ...
