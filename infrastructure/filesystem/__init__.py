"""
Filesystem Infrastructure - Local directory implementations.

This module provides:
- FilesystemArtifactStore: Directory-backed artifact store (implements IArtifactStore)
"""

from .artifact_store import (
    FilesystemArtifactStore,
    get_artifact_store,
    reset_artifact_store,
)

__all__ = [
    "FilesystemArtifactStore",
    "get_artifact_store",
    "reset_artifact_store",
]
