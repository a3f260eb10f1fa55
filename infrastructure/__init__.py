"""
Infrastructure Layer - External system integrations.

This layer contains implementations of interfaces defined in the interfaces/ layer.
Each subdirectory groups implementations by external dependency.

Structure:
- filesystem/  - Directory-backed artifact store
- ytdlp/       - yt-dlp downloader integration
"""

from .filesystem import FilesystemArtifactStore, get_artifact_store
from .ytdlp import YtDlpFetcher, get_ytdlp_fetcher

__all__ = [
    # Artifact store
    "FilesystemArtifactStore",
    "get_artifact_store",
    # Downloader
    "YtDlpFetcher",
    "get_ytdlp_fetcher",
]
