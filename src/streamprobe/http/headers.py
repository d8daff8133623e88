# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

Header names are case-insensitive, and stream servers are inconsistent about
casing, so lookups always go through the lowercase form.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping (dict, httpx.Headers or pairs)."""
    if not headers:
        return {}
    items = headers.items() if hasattr(headers, "items") else headers
    out: dict[str, str] = {}
    for key, value in items:
        if key is None:
            continue
        name = str(key).strip().lower()
        if name:
            out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default
    lower = name.lower()
    if lower in headers:
        return str(headers[lower]).strip()
    for key, value in headers.items():
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()
    return default


def content_type(headers: Mapping[str, str] | None) -> str:
    """Lowercased Content-Type header, parameters included."""
    return header_value(headers, "content-type").lower()


__all__ = ["content_type", "header_value", "normalize_headers"]
