# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Catalog stores that supply targets and persist liveness flags."""

from .base import CatalogStore
from .json_store import JsonCatalogStore
from .memory import MemoryCatalogStore

__all__ = ["CatalogStore", "JsonCatalogStore", "MemoryCatalogStore"]
