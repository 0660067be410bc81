"""
Download Store - short-lived links for exported files.

An export is delivered by registering its bytes under an opaque token
and handing the client a URL. The link is revoked after a TTL (60s by
default), mirroring a revoked object URL.

Design follows the pending-state services:
- In-memory storage with TTL
- Singleton instance
- Cleanup on operations

Usage:
    from explainer.export.downloads import download_store

    link = download_store.trigger_download(exported)
    # client fetches GET /api/downloads/{link.token}
    exported = download_store.get(link.token)
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from explainer.core.config import settings
from explainer.export.contracts import ExportedFile

logger = logging.getLogger("explainer.export.downloads")

DOWNLOAD_PATH_PREFIX = "/api/downloads"


@dataclass
class DownloadLink:
    """A registered export and its expiry."""
    token: str
    file: ExportedFile
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def url(self) -> str:
        return f"{DOWNLOAD_PATH_PREFIX}/{self.token}"

    def is_expired(self) -> bool:
        return datetime.now(timezone.utc) >= self.expires_at


class DownloadStore:
    """In-memory token -> file registry with per-link revocation."""

    def __init__(self, ttl_seconds: Optional[float] = None):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.DOWNLOAD_TTL_SECONDS
        self._links: Dict[str, DownloadLink] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self.issued_count = 0

    def trigger_download(self, file: ExportedFile) -> DownloadLink:
        """Register ``file`` once and schedule its revocation."""
        self._cleanup_expired()

        now = datetime.now(timezone.utc)
        link = DownloadLink(
            token=secrets.token_urlsafe(16),
            file=file,
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )
        self._links[link.token] = link
        self.issued_count += 1

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._timers[link.token] = loop.call_later(self.ttl_seconds, self.revoke, link.token)

        logger.info(f"Download ready: {file.filename} ({file.size} bytes), expires in {self.ttl_seconds:g}s")
        return link

    def get(self, token: str) -> Optional[DownloadLink]:
        link = self._links.get(token)
        if link is None:
            return None
        if link.is_expired():
            self.revoke(token)
            return None
        return link

    def revoke(self, token: str) -> bool:
        """Forget a link. Returns False if it was already gone."""
        timer = self._timers.pop(token, None)
        if timer is not None:
            timer.cancel()
        link = self._links.pop(token, None)
        if link is not None:
            logger.debug(f"Revoked download {link.file.filename}")
        return link is not None

    def active_count(self) -> int:
        self._cleanup_expired()
        return len(self._links)

    def _cleanup_expired(self) -> None:
        expired = [token for token, link in self._links.items() if link.is_expired()]
        for token in expired:
            self.revoke(token)


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------

download_store = DownloadStore()
