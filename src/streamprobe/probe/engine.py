# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-URL liveness probe."""

from __future__ import annotations

import logging
import time

from ..config import ProbeSettings, load_probe_settings
from ..errors import ErrorCategory
from ..http.client import HttpClient
from ..http.headers import content_type
from ..http.models import HttpRequest, HttpResponse
from ..http.url import is_probeable_url
from ..models.outcome import ProbeOutcome, ProbeReason
from .kind import StreamKind, detect_stream_kind, is_media_content_type
from .playlist import extract_first_segment, has_playlist_header

logger = logging.getLogger(__name__)


class ProbeEngine:
    """
    Decides whether one URL currently serves playable content.

    Playlists are only trusted once their first segment answers a HEAD
    request: dead IPTV channels commonly keep serving a well-formed manifest
    whose segments have expired.
    """

    def __init__(self, http_client: HttpClient, settings: ProbeSettings | None = None):
        self.http_client = http_client
        self.settings = settings or load_probe_settings()

    def check(self, url: str, timeout: float | None = None) -> ProbeOutcome:
        timeout = timeout if timeout is not None else self.settings.timeout
        deadline = time.monotonic() + timeout
        if not is_probeable_url(url):
            return ProbeOutcome.failed(ProbeReason.REQUEST_ERROR, detail="unsupported or malformed URL")

        request = HttpRequest(
            url=url,
            method="GET",
            headers={"User-Agent": self.settings.user_agent, "Accept": "*/*"},
            timeout=timeout,
            allow_redirects=self.settings.allow_redirects,
            read_limit=lambda head: self._body_budget(url, head),
        )
        response = self.http_client.request(request)

        if not response.ok:
            logger.debug("GET %s failed: %s (%s)", url, response.error_type, response.error_message)
            if response.error_category is ErrorCategory.INVALID_REQUEST:
                return ProbeOutcome.failed(ProbeReason.REQUEST_ERROR, detail=response.error_type)
            return ProbeOutcome.failed(ProbeReason.CONNECTION_ERROR, detail=response.error_category.value)

        if not response.status_ok:
            return ProbeOutcome.failed(ProbeReason.STATUS, status_code=response.status_code)

        kind = detect_stream_kind(url, content_type(response.headers))
        if kind is StreamKind.PLAYLIST:
            return self._check_playlist(url, response, deadline)
        return self._check_media(response)

    def _body_budget(self, url: str, head: HttpResponse) -> int:
        """Bytes worth reading for a response, decided from its status and headers."""
        if not head.status_ok:
            return 0
        ctype = content_type(head.headers)
        if detect_stream_kind(url, ctype) is StreamKind.PLAYLIST:
            return self.settings.playlist_max_bytes
        if is_media_content_type(ctype):
            return self.settings.min_media_bytes
        return 0

    def _check_playlist(self, url: str, response: HttpResponse, deadline: float) -> ProbeOutcome:
        if response.read_error:
            return ProbeOutcome.failed(ProbeReason.READ_ERROR, detail=response.read_error)

        body = response.text
        if not has_playlist_header(body):
            return ProbeOutcome.failed(ProbeReason.INVALID_M3U8)

        segment_url = extract_first_segment(body, url)
        if segment_url is None:
            return ProbeOutcome.failed(ProbeReason.NO_SEGMENTS)

        return self._check_segment(segment_url, deadline)

    def _check_segment(self, segment_url: str, deadline: float) -> ProbeOutcome:
        # The HEAD shares the budget of the whole check.
        timeout = min(self.settings.effective_segment_timeout, deadline - time.monotonic())
        if timeout <= 0:
            return ProbeOutcome.failed(ProbeReason.SEGMENTS_BROKEN, detail=ErrorCategory.TIMEOUT.value)
        response = self.http_client.request(
            HttpRequest(
                url=segment_url,
                method="HEAD",
                headers={"User-Agent": self.settings.segment_user_agent},
                timeout=timeout,
                allow_redirects=self.settings.allow_redirects,
            )
        )
        if not response.ok:
            logger.debug("HEAD %s failed: %s", segment_url, response.error_type)
            return ProbeOutcome.failed(ProbeReason.SEGMENTS_BROKEN, detail=response.error_category.value)
        if not response.status_ok:
            return ProbeOutcome.failed(ProbeReason.SEGMENTS_BROKEN, detail=f"segment status {response.status_code}")
        return ProbeOutcome.ok()

    def _check_media(self, response: HttpResponse) -> ProbeOutcome:
        ctype = content_type(response.headers)
        if not is_media_content_type(ctype):
            return ProbeOutcome.failed(ProbeReason.INVALID_TYPE, detail=ctype or None)

        # Reaching the byte threshold wins even if the stream faulted afterwards.
        if len(response.content) >= self.settings.min_media_bytes:
            return ProbeOutcome.ok()
        if response.read_error:
            return ProbeOutcome.failed(ProbeReason.READ_ERROR, detail=response.read_error)
        return ProbeOutcome.failed(ProbeReason.NO_DATA, detail=f"{len(response.content)} bytes")
