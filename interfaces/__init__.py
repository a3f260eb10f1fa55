"""
Interface Layer - Abstract interfaces for dependency injection.

This layer defines contracts that infrastructure implementations must fulfill.
Services depend on these interfaces, not concrete implementations.
"""

from .artifact_store import IArtifactStore
from .audio_fetcher import IAudioFetcher

__all__ = [
    "IArtifactStore",
    "IAudioFetcher",
]
