"""
Artifact Store Interface - Abstract interface for the directory of produced audio files.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from models.schemas import Artifact, StoreStats


class IArtifactStore(ABC):
    """
    Abstract interface for a flat store of identifier-named artifacts.

    Presence of the file is the existence record; there is no separate index.

    Implementations:
    - infrastructure.filesystem.artifact_store.FilesystemArtifactStore
    """

    @property
    @abstractmethod
    def extension(self) -> str:
        """Artifact file extension without the leading dot."""
        pass

    @abstractmethod
    def exists(self, video_id: str) -> bool:
        """Check whether an artifact for video_id is present (stat only)."""
        pass

    @abstractmethod
    def path(self, video_id: str) -> Path:
        """Public path of the artifact for video_id; does not imply existence."""
        pass

    @abstractmethod
    def staging_path(self, video_id: str) -> Path:
        """Private path a new artifact is written to before commit()."""
        pass

    @abstractmethod
    def commit(self, staged: Path, video_id: str) -> Path:
        """
        Atomically move a staged file to its public path.

        Raises:
            StoreIOError: If the rename fails
        """
        pass

    @abstractmethod
    def total_size(self) -> int:
        """
        Sum of all file sizes under the store root, in bytes.

        Raises:
            StoreIOError: If the tree cannot be walked
        """
        pass

    @abstractmethod
    def list_artifacts(self) -> List[Artifact]:
        """
        All artifacts currently in the store.

        Raises:
            StoreIOError: If the tree cannot be walked
        """
        pass

    @abstractmethod
    def oldest(self) -> Path:
        """
        Path of the artifact with the smallest modification time.

        Raises:
            NoArtifactsError: If the store holds no artifacts
            StoreIOError: If the tree cannot be walked
        """
        pass

    @abstractmethod
    def remove(self, path: Path) -> None:
        """
        Delete an artifact.

        Raises:
            StoreIOError: If the file is missing or cannot be deleted
        """
        pass

    @abstractmethod
    def stats(self, budget_bytes: int) -> StoreStats:
        """Snapshot of artifact count and total size against a budget."""
        pass
