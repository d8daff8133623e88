# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe engine: one URL in, one verdict out."""

from .engine import ProbeEngine
from .kind import StreamKind, detect_stream_kind, is_media_content_type
from .playlist import extract_first_segment, has_playlist_header

__all__ = [
    "ProbeEngine",
    "StreamKind",
    "detect_stream_kind",
    "extract_first_segment",
    "has_playlist_header",
    "is_media_content_type",
]
