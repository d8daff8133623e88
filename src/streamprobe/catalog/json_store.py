# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
JSON-file catalog store.

The file holds a JSON array of channel records::

    [{"id": "abc", "url": "http://...", "title": "News", "is_working": true}]

Only ``id`` and ``url`` are required. Unknown keys are preserved on rewrite.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Hashable
from pathlib import Path
from typing import Any

from ..errors import CatalogError
from ..models.target import ProbeTarget

logger = logging.getLogger(__name__)

WORKING_FIELD = "is_working"


class JsonCatalogStore:
    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._records = self._load()
        self._index: dict[Hashable, dict[str, Any]] = {record["id"]: record for record in self._records}
        self._dirty = False

    def _load(self) -> list[dict[str, Any]]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise CatalogError(f"cannot read catalog {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CatalogError(f"catalog {self.path} is not valid JSON: {exc}") from exc

        if not isinstance(data, list):
            raise CatalogError(f"catalog {self.path} must contain a JSON array of records")

        seen: set[Hashable] = set()
        for position, record in enumerate(data):
            if not isinstance(record, dict) or record.get("id") in (None, ""):
                raise CatalogError(f"catalog record {position} has no id")
            if isinstance(record["id"], bool) or not isinstance(record["id"], (str, int)):
                raise CatalogError(f"catalog record {position} has an id that is not a string or integer")
            if record["id"] in seen:
                raise CatalogError(f"duplicate catalog id {record['id']!r}")
            seen.add(record["id"])
        return data

    def list_targets(self) -> list[ProbeTarget]:
        targets = []
        for record in self._records:
            url = str(record.get("url") or "").strip()
            if not url:
                logger.debug("Skipping catalog record %s without url", record["id"])
                continue
            targets.append(ProbeTarget(id=record["id"], url=url))
        return targets

    def set_working(self, target_id: Hashable, works: bool) -> None:
        record = self._index.get(target_id)
        if record is None:
            raise CatalogError(f"unknown target {target_id!r}")
        record[WORKING_FIELD] = bool(works)
        self._dirty = True

    def prune_broken(self) -> int:
        kept = []
        removed = 0
        for record in self._records:
            if record.get(WORKING_FIELD) is False:
                logger.info("Pruned %s (%s)", record.get("title") or record["id"], record.get("url"))
                self._index.pop(record["id"], None)
                removed += 1
            else:
                kept.append(record)
        if removed:
            self._records = kept
            self._dirty = True
        return removed

    def flush(self) -> None:
        """Rewrite the file atomically if anything changed."""
        if not self._dirty:
            return
        directory = self.path.parent
        try:
            with tempfile.NamedTemporaryFile("w", dir=directory, delete=False, encoding="utf-8") as tmp:
                json.dump(self._records, tmp, ensure_ascii=False, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp.name, self.path)
        except OSError as exc:
            raise CatalogError(f"cannot write catalog {self.path}: {exc}") from exc
        self._dirty = False
