"""
Exception hierarchy for the MP3 host service.

Validation errors map to 4xx responses, DownloadError maps to 500,
store errors are swallowed by the eviction pass.
"""

from typing import Optional


class Mp3HostError(Exception):
    """Base class for all service errors."""


class InvalidURLError(Mp3HostError, ValueError):
    """Request body does not look like an http(s) URL."""


class UnrecognizedVideoURLError(Mp3HostError, ValueError):
    """URL is well formed but no video identifier could be derived from it."""


class DownloadError(Mp3HostError):
    """External downloader failed to produce the audio file."""

    def __init__(self, message: str, output: Optional[str] = None):
        super().__init__(message)
        self.output = output or ""


class StoreIOError(Mp3HostError, OSError):
    """Filesystem operation on the artifact store failed."""


class NoArtifactsError(Mp3HostError):
    """Store holds no artifacts to evict."""


class ConfigError(Mp3HostError):
    """Configuration file could not be read or is invalid."""


class MissingDependencyError(Mp3HostError):
    """A required external executable is not available."""


__all__ = [
    "Mp3HostError",
    "InvalidURLError",
    "UnrecognizedVideoURLError",
    "DownloadError",
    "StoreIOError",
    "NoArtifactsError",
    "ConfigError",
    "MissingDependencyError",
]
