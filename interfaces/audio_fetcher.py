"""
Audio Fetcher Interface - Abstract interface for producing an audio file from a video URL.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class IAudioFetcher(ABC):
    """
    Abstract interface for fetching the audio track of a video.

    Implementations:
    - infrastructure.ytdlp.fetcher.YtDlpFetcher
    """

    @abstractmethod
    async def fetch(self, url: str, destination: Path) -> Path:
        """
        Download the video at url, extract its audio and write it to destination.

        Args:
            url: Source video URL
            destination: Path the encoded audio file must end up at

        Returns:
            Path of the written file (equal to destination)

        Raises:
            DownloadError: If the downloader fails or produces no file
        """
        pass
