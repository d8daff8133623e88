# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Stream kind detection from response metadata."""

from __future__ import annotations

from enum import Enum

from ..http.url import path_endswith

# Matches application/vnd.apple.mpegurl, application/x-mpegurl and audio/mpegurl.
PLAYLIST_CONTENT_MARKER = "mpegurl"
PLAYLIST_SUFFIX = ".m3u8"
MEDIA_TYPE_PREFIXES = ("video/", "audio/")


class StreamKind(str, Enum):
    PLAYLIST = "playlist"
    RAW_MEDIA = "raw_media"


def detect_stream_kind(url: str, content_type: str) -> StreamKind:
    if PLAYLIST_CONTENT_MARKER in (content_type or "").lower():
        return StreamKind.PLAYLIST
    if path_endswith(url, (PLAYLIST_SUFFIX,)):
        return StreamKind.PLAYLIST
    return StreamKind.RAW_MEDIA


def is_media_content_type(content_type: str) -> bool:
    return (content_type or "").strip().lower().startswith(MEDIA_TYPE_PREFIXES)


__all__ = ["StreamKind", "detect_stream_kind", "is_media_content_type"]
