"""
Filesystem Artifact Store - A flat directory of identifier-named audio files.

Implements IArtifactStore. Size and age are computed by walking the directory
on every call; nothing is cached between calls, so there is no index that can
go stale.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from core.config import get_settings
from core.constants import DEFAULT_AUDIO_FORMAT, STAGING_DIR_NAME
from core.errors import NoArtifactsError, StoreIOError
from core.logger import logger
from core.messages import ErrorMessages
from interfaces.artifact_store import IArtifactStore
from models.schemas import Artifact, StoreStats


class FilesystemArtifactStore(IArtifactStore):
    """
    Artifact store backed by a single directory.

    Artifacts live at ``<root>/<id>.<ext>``. New downloads are written under
    ``<root>/.staging`` and renamed into place, so a partial file is never
    visible at a public path.
    """

    def __init__(self, root: Path, extension: str = DEFAULT_AUDIO_FORMAT):
        self.root = Path(root)
        self._extension = extension.lstrip(".")
        self.staging_dir = self.root / STAGING_DIR_NAME

    @property
    def extension(self) -> str:
        return self._extension

    def ensure_root(self) -> None:
        """Create the store and staging directories if missing."""
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(
                ErrorMessages.STORE_WALK_FAILED.format(path=self.root, error=e)
            ) from e

    def _filename(self, video_id: str) -> str:
        return f"{video_id}.{self._extension}"

    def path(self, video_id: str) -> Path:
        return self.root / self._filename(video_id)

    def staging_path(self, video_id: str) -> Path:
        return self.staging_dir / self._filename(video_id)

    def exists(self, video_id: str) -> bool:
        artifact_path = self.path(video_id)
        try:
            os.stat(artifact_path)
        except FileNotFoundError:
            logger.debug(f"File {artifact_path} does not exist.")
            return False
        except OSError as e:
            logger.warning(f"Error checking file {artifact_path}: {e}")
            return False
        logger.debug(f"File {artifact_path} exists.")
        return True

    def commit(self, staged: Path, video_id: str) -> Path:
        destination = self.path(video_id)
        try:
            os.replace(staged, destination)
        except OSError as e:
            raise StoreIOError(
                ErrorMessages.STORE_COMMIT_FAILED.format(
                    src=staged, dst=destination, error=e
                )
            ) from e
        return destination

    def _walk(self, skip_staging: bool = False):
        """Yield file paths under the root, raising StoreIOError on any walk error."""

        def _raise(error: OSError) -> None:
            raise StoreIOError(
                ErrorMessages.STORE_WALK_FAILED.format(path=self.root, error=error)
            ) from error

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_raise):
            if skip_staging and Path(dirpath) == self.root and STAGING_DIR_NAME in dirnames:
                dirnames.remove(STAGING_DIR_NAME)
            for name in filenames:
                yield Path(dirpath) / name

    def _stat(self, path: Path) -> Optional[os.stat_result]:
        """Stat a file found by a walk; None if it vanished since."""
        try:
            return os.stat(path)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreIOError(
                ErrorMessages.STORE_WALK_FAILED.format(path=path, error=e)
            ) from e

    def total_size(self) -> int:
        total = 0
        for file_path in self._walk():
            st = self._stat(file_path)
            if st is not None:
                total += st.st_size
        return total

    def list_artifacts(self) -> List[Artifact]:
        suffix = f".{self._extension}"
        artifacts = []
        for file_path in self._walk(skip_staging=True):
            if file_path.suffix != suffix:
                continue
            st = self._stat(file_path)
            if st is None:
                continue
            artifacts.append(
                Artifact(
                    id=file_path.stem,
                    path=file_path,
                    size_bytes=st.st_size,
                    modified_at=datetime.fromtimestamp(st.st_mtime),
                )
            )
        return artifacts

    def oldest(self) -> Path:
        """
        Artifact with the smallest mtime.

        Equal mtimes are ordered by path name so the choice is deterministic.
        """
        artifacts = self.list_artifacts()
        if not artifacts:
            raise NoArtifactsError(
                ErrorMessages.STORE_EMPTY.format(ext=self._extension, path=self.root)
            )

        oldest = min(artifacts, key=lambda a: (a.modified_at, str(a.path)))
        return oldest.path

    def remove(self, path: Path) -> None:
        try:
            os.remove(path)
        except OSError as e:
            raise StoreIOError(
                ErrorMessages.STORE_REMOVE_FAILED.format(path=path, error=e)
            ) from e

    def stats(self, budget_bytes: int) -> StoreStats:
        return StoreStats(
            files_dir=str(self.root),
            artifact_count=len(self.list_artifacts()),
            total_size_bytes=self.total_size(),
            budget_bytes=budget_bytes,
        )


# Global singleton instance
_artifact_store: Optional[FilesystemArtifactStore] = None


def get_artifact_store() -> FilesystemArtifactStore:
    """
    Get or create global FilesystemArtifactStore instance (singleton).

    Returns:
        FilesystemArtifactStore rooted at settings.files_dir
    """
    global _artifact_store

    if _artifact_store is None:
        settings = get_settings()
        logger.info(f"Creating FilesystemArtifactStore at {settings.files_dir}...")
        _artifact_store = FilesystemArtifactStore(
            Path(settings.files_dir), extension=settings.audio_format
        )

    return _artifact_store


def reset_artifact_store() -> None:
    """Drop the singleton so the next call picks up new settings."""
    global _artifact_store
    _artifact_store = None
