"""
L1 Domain — Download helpers (pure).

Size formatting and URL shortening for log lines.
"""

from __future__ import annotations

from urllib.parse import urlsplit


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def _url_host(url: str) -> str:
    """Host part of a URL, or the URL itself if it has none."""
    return urlsplit(url).netloc or url
