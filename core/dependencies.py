"""
System dependencies validation and FastAPI dependency injection.

This module provides:
- System dependency validation (yt-dlp, ffmpeg)
- FastAPI dependency injection functions for routes
"""

import os
import shutil
from typing import Optional, Tuple

from core.config import get_settings
from core.errors import MissingDependencyError
from core.logger import logger
from core.messages import ErrorMessages


def resolve_executable(exec_path: str) -> Optional[str]:
    """
    Resolve the downloader executable to an absolute path.

    Accepts either a path (absolute or relative) or a bare name looked up on PATH.

    Returns:
        Resolved path, or None if not found or not executable
    """
    if os.sep in exec_path:
        path = os.path.abspath(exec_path)
        if os.path.isfile(path) and os.access(path, os.X_OK):
            return path
        return None
    return shutil.which(exec_path)


def check_ffmpeg() -> Tuple[bool, Optional[str]]:
    """
    Check if ffmpeg is installed; yt-dlp needs it to extract audio.

    Returns:
        Tuple of (is_available, path)
    """
    ffmpeg_path = shutil.which("ffmpeg")
    if ffmpeg_path:
        return True, ffmpeg_path

    logger.warning("ffmpeg not found in PATH")
    return False, None


def validate_dependencies(require_downloader: bool = False) -> None:
    """
    Validate the external tools the fetch path relies on.

    Args:
        require_downloader: If True, a missing downloader raises instead of warning

    Raises:
        MissingDependencyError: If require_downloader and the downloader is missing
    """
    logger.info("Validating system dependencies...")
    settings = get_settings()

    downloader = resolve_executable(settings.exec_path)
    if downloader:
        logger.info(f"Downloader executable found: {downloader}")
    else:
        error_msg = ErrorMessages.EXECUTABLE_NOT_FOUND.format(path=settings.exec_path)
        if require_downloader:
            logger.error(error_msg)
            raise MissingDependencyError(error_msg)
        logger.warning(
            f"{error_msg}. Downloads will fail at runtime. "
            "Install yt-dlp or set EXEC_PATH / execPath to its location."
        )

    ffmpeg_available, ffmpeg_path = check_ffmpeg()
    if ffmpeg_available:
        logger.info(f"ffmpeg found: {ffmpeg_path}")

    logger.info("System dependencies check passed")


# =============================================================================
# FastAPI Dependency Injection
# =============================================================================


def get_mp3_service_dependency():
    """
    FastAPI dependency for Mp3Service.

    Usage in routes:
        @router.post("/mp3")
        async def mp3(service: Mp3Service = Depends(get_mp3_service_dependency)):
            ...

    Returns:
        Mp3Service instance with injected dependencies
    """
    from core.container import get_mp3_service

    return get_mp3_service()


def get_artifact_store_dependency():
    """
    FastAPI dependency for IArtifactStore.

    Returns:
        IArtifactStore implementation
    """
    from core.container import get_artifact_store

    return get_artifact_store()
