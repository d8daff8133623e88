# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Minimal M3U8 reading.

Only what liveness needs: the ``#EXTM3U`` header somewhere in the captured
prefix and the first URI line that looks like a media segment or a nested
playlist. Tag order, durations and the rest of the manifest are not checked.
"""

from __future__ import annotations

from collections.abc import Iterator

from ..http.url import resolve_reference, url_path

EXTM3U_TAG = "#EXTM3U"
SEGMENT_SUFFIXES = (".ts", ".m4s", ".mp4", ".m3u8")
SEGMENT_MARKER = "segment"


def has_playlist_header(content: str) -> bool:
    return EXTM3U_TAG in content


def iter_uri_lines(content: str) -> Iterator[str]:
    """Yield non-blank lines that are not tags or comments."""
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        yield line


def is_segment_reference(line: str) -> bool:
    """Case-sensitive; the suffix check also holds once a query string is dropped."""
    return SEGMENT_MARKER in line or line.endswith(SEGMENT_SUFFIXES) or url_path(line).endswith(SEGMENT_SUFFIXES)


def first_segment_reference(content: str) -> str | None:
    for line in iter_uri_lines(content):
        if is_segment_reference(line):
            return line
    return None


def extract_first_segment(content: str, base_url: str) -> str | None:
    """Absolute URL of the first segment reference, or None when there is none."""
    reference = first_segment_reference(content)
    if reference is None:
        return None
    try:
        return resolve_reference(base_url, reference)
    except ValueError:
        return None


__all__ = [
    "EXTM3U_TAG",
    "extract_first_segment",
    "first_segment_reference",
    "has_playlist_header",
    "is_segment_reference",
    "iter_uri_lines",
]
