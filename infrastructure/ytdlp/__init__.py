"""
yt-dlp Infrastructure - External downloader integration.

This module provides:
- YtDlpFetcher: Out-of-process audio fetcher (implements IAudioFetcher)
"""

from .fetcher import YtDlpFetcher, get_ytdlp_fetcher, reset_ytdlp_fetcher

__all__ = [
    "YtDlpFetcher",
    "get_ytdlp_fetcher",
    "reset_ytdlp_fetcher",
]
