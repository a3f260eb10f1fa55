"""
MP3 Service - Business logic for turning a video URL into a hosted audio file.

This service orchestrates identifier extraction, cache lookup, download and
eviction using dependency injection through interfaces:
- IArtifactStore: the hosting directory
- IAudioFetcher: the external downloader
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from core.config import get_settings
from core.constants import FILES_ROUTE_PREFIX
from core.logger import logger
from core.messages import LogMessages
from interfaces.artifact_store import IArtifactStore
from interfaces.audio_fetcher import IAudioFetcher
from services.eviction import EvictionPolicy
from services.identifier import parse_request_url
from services.inflight import InFlightRegistry


@dataclass
class FetchOutcome:
    """Result of resolving one request URL to an artifact."""

    video_id: str
    path: Path
    cache_hit: bool
    # True only for the request that actually ran the downloader
    fetched: bool = False


class Mp3Service:
    """
    Resolves video URLs to artifacts, downloading on cache miss.

    Concurrent misses for the same identifier share a single download.
    """

    def __init__(
        self,
        store: Optional[IArtifactStore] = None,
        fetcher: Optional[IAudioFetcher] = None,
        eviction_policy: Optional[EvictionPolicy] = None,
        inflight: Optional[InFlightRegistry] = None,
    ):
        settings = get_settings()

        self.store = store or self._get_default_store()
        self.fetcher = fetcher or self._get_default_fetcher()
        self.eviction_policy = eviction_policy or EvictionPolicy(
            self.store,
            budget_bytes=settings.budget_bytes,
            max_evictions=settings.max_evictions_per_pass,
        )
        self.inflight = inflight or InFlightRegistry()

        logger.info(
            f"Mp3Service initialized "
            f"(store={self.store.__class__.__name__}, "
            f"fetcher={self.fetcher.__class__.__name__}, "
            f"budget={self.eviction_policy.budget_bytes} bytes)"
        )

    def _get_default_store(self) -> IArtifactStore:
        from infrastructure.filesystem.artifact_store import get_artifact_store

        return get_artifact_store()

    def _get_default_fetcher(self) -> IAudioFetcher:
        from infrastructure.ytdlp.fetcher import get_ytdlp_fetcher

        return get_ytdlp_fetcher()

    def public_url(self, host: str, video_id: str) -> str:
        """Public URL of an artifact as returned to clients."""
        return f"{host}{FILES_ROUTE_PREFIX}/{video_id}.{self.store.extension}"

    async def get_or_fetch(self, raw_url: str) -> FetchOutcome:
        """
        Resolve a request body to an artifact, downloading it if absent.

        Raises:
            InvalidURLError: If the body is not an http(s) URL
            UnrecognizedVideoURLError: If no identifier can be derived
            DownloadError: If the downloader fails
            StoreIOError: If the downloaded file cannot be moved into place
        """
        url = raw_url.strip()
        video_id = parse_request_url(url)

        if self.store.exists(video_id):
            path = self.store.path(video_id)
            logger.info(LogMessages.CACHE_HIT.format(path=path))
            return FetchOutcome(video_id=video_id, path=path, cache_hit=True)

        logger.info(LogMessages.CACHE_MISS.format(path=self.store.path(video_id)))
        path, leader = await self.inflight.run(
            video_id, lambda: self._fetch(url, video_id)
        )
        return FetchOutcome(video_id=video_id, path=path, cache_hit=False, fetched=leader)

    async def _fetch(self, url: str, video_id: str) -> Path:
        """Download into staging, then atomically publish."""
        staged = self.store.staging_path(video_id)
        try:
            await self.fetcher.fetch(url, staged)
            return self.store.commit(staged, video_id)
        except BaseException:
            # Cancellation too: a cancelled download must not leave partial files
            self._discard_staged(staged)
            raise

    def _discard_staged(self, staged: Path) -> None:
        """Remove leftovers of a failed download (partial and intermediate files)."""
        for leftover in staged.parent.glob(f"{staged.stem}.*"):
            try:
                leftover.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Failed to clean up staged file {leftover}: {e}")

    def enforce_budget(self) -> List[Path]:
        """Run an eviction pass. Never raises on store errors."""
        return self.eviction_policy.maybe_evict()

