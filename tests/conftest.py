"""
Shared fixtures for the MP3 host tests.

Environment is set before any project import so the import-time logger and
settings never write into the working directory.
"""

import os
import sys
from pathlib import Path

os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import asyncio  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402

from core.errors import DownloadError  # noqa: E402
from infrastructure.filesystem.artifact_store import FilesystemArtifactStore  # noqa: E402
from interfaces.audio_fetcher import IAudioFetcher  # noqa: E402

MB = 1024 * 1024


class MockAudioFetcher(IAudioFetcher):
    """Fetcher that writes a fixed number of bytes instead of running yt-dlp."""

    def __init__(
        self,
        size_bytes: int = 1024,
        should_fail: bool = False,
        leave_partial: bool = False,
        gate: Optional[asyncio.Event] = None,
    ):
        self.size_bytes = size_bytes
        self.should_fail = should_fail
        self.leave_partial = leave_partial
        self.gate = gate
        self.calls = []

    async def fetch(self, url: str, destination: Path) -> Path:
        self.calls.append((url, destination))
        destination.parent.mkdir(parents=True, exist_ok=True)

        if self.gate is not None:
            await self.gate.wait()

        if self.should_fail:
            if self.leave_partial:
                destination.with_suffix(".webm.part").write_bytes(b"partial")
            raise DownloadError("Downloader exited with code 1", output="ERROR: Video unavailable")

        destination.write_bytes(b"\0" * self.size_bytes)
        return destination


def write_artifact(root: Path, name: str, size_bytes: int, mtime: float) -> Path:
    """Create a (sparse) file of size_bytes with the given mtime."""
    path = root / name
    with open(path, "wb") as f:
        f.truncate(size_bytes)
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def store_dir(tmp_path) -> Path:
    return tmp_path / "files"


@pytest.fixture
def store(store_dir) -> FilesystemArtifactStore:
    artifact_store = FilesystemArtifactStore(store_dir, extension="mp3")
    artifact_store.ensure_root()
    return artifact_store


@pytest.fixture
def mock_fetcher() -> MockAudioFetcher:
    return MockAudioFetcher()
