# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for streamprobe."""

import os
from dataclasses import dataclass


BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SEGMENT_USER_AGENT = "Mozilla/5.0"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _positive(value: float, default: float) -> float:
    return value if value > 0 else default


@dataclass
class ProbeSettings:
    """Batch and HTTP client defaults."""

    workers: int = 10
    timeout: float = 8.0
    segment_timeout: float = 5.0
    max_idle_connections: int = 100
    idle_timeout: float = 30.0
    playlist_max_bytes: int = 1024 * 1024
    min_media_bytes: int = 10
    user_agent: str = BROWSER_USER_AGENT
    segment_user_agent: str = SEGMENT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True

    @property
    def effective_segment_timeout(self) -> float:
        """The HEAD probe never waits longer than the main request would."""
        return min(self.timeout, self.segment_timeout)

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            workers=int(_positive(_int_env("STREAMPROBE_WORKERS", cls.workers), cls.workers)),
            timeout=_positive(_float_env("STREAMPROBE_TIMEOUT", cls.timeout), cls.timeout),
            segment_timeout=_positive(
                _float_env("STREAMPROBE_SEGMENT_TIMEOUT", cls.segment_timeout), cls.segment_timeout
            ),
            max_idle_connections=int(
                _positive(_int_env("STREAMPROBE_MAX_IDLE_CONNECTIONS", cls.max_idle_connections), cls.max_idle_connections)
            ),
            idle_timeout=_positive(_float_env("STREAMPROBE_IDLE_TIMEOUT", cls.idle_timeout), cls.idle_timeout),
            playlist_max_bytes=int(
                _positive(_int_env("STREAMPROBE_PLAYLIST_MAX_BYTES", cls.playlist_max_bytes), cls.playlist_max_bytes)
            ),
            user_agent=os.getenv("STREAMPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("STREAMPROBE_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("STREAMPROBE_VERIFY_SSL", cls.verify_ssl),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
