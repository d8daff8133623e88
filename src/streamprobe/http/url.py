# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared across probes."""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit

HTTP_SCHEMES = frozenset({"http", "https"})


def is_probeable_url(url: str) -> bool:
    """Return True when the URL is an absolute http(s) URL with a host."""
    try:
        parts = urlsplit(str(url or "").strip())
    except ValueError:
        return False
    return parts.scheme.lower() in HTTP_SCHEMES and bool(parts.netloc)


def url_path(url: str) -> str:
    """Path component of a URL or relative reference, without query or fragment."""
    try:
        return urlsplit(str(url or "")).path
    except ValueError:
        return str(url or "")


def path_endswith(url: str, suffixes: tuple[str, ...]) -> bool:
    return url_path(url).lower().endswith(suffixes)


def resolve_reference(base_url: str, reference: str) -> str:
    """
    Resolve a playlist entry against the playlist URL.

    Absolute http(s) references are returned unchanged; anything else
    (relative paths, root-relative and protocol-relative references) is joined.
    """
    if is_probeable_url(reference):
        return reference
    return urljoin(base_url, reference)


__all__ = ["is_probeable_url", "path_endswith", "resolve_reference", "url_path"]
