"""
yt-dlp Audio Fetcher - Runs the external downloader to produce an audio file.

Implements IAudioFetcher. The downloader runs as an asyncio subprocess, so
each download holds only its own request and never a shared worker slot;
a slow or hung download cannot delay downloads of other videos.
"""

import asyncio
import time
from pathlib import Path
from typing import List, Optional, Tuple

from core.config import get_settings
from core.constants import DEFAULT_AUDIO_FORMAT, DOWNLOAD_OUTPUT_LOG_LIMIT
from core.errors import DownloadError
from core.logger import logger
from core.messages import ErrorMessages, LogMessages
from interfaces.audio_fetcher import IAudioFetcher

# Bytes read from the downloader's output pipe per chunk
READ_CHUNK_SIZE = 64 * 1024


def _truncate(output: str) -> str:
    if len(output) <= DOWNLOAD_OUTPUT_LOG_LIMIT:
        return output
    return "..." + output[-DOWNLOAD_OUTPUT_LOG_LIMIT:]


def _decode(chunks: List[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


class YtDlpFetcher(IAudioFetcher):
    """
    Audio fetcher backed by the yt-dlp command line tool.

    Success is decided by the exit status and the presence of the expected
    output file; the tool's output is only kept for diagnostics.
    """

    def __init__(
        self,
        exec_path: str,
        audio_format: str = DEFAULT_AUDIO_FORMAT,
        timeout_seconds: Optional[float] = None,
    ):
        self.exec_path = exec_path
        self.audio_format = audio_format
        self.timeout_seconds = timeout_seconds

    def build_command(self, url: str, destination: Path) -> List[str]:
        """
        Build the downloader argv.

        yt-dlp picks the extension itself, so the output template uses
        %(ext)s and the audio post-processor renames to the target format.
        """
        output_template = str(destination.with_suffix("")) + ".%(ext)s"
        return [
            self.exec_path,
            url,
            "-x",
            "--audio-format",
            self.audio_format,
            "-o",
            output_template,
        ]

    async def _run(self, command: List[str]) -> Tuple[int, str]:
        """
        Run the downloader to completion.

        The timeout, when set, covers the whole run. The process is killed if
        it times out or the awaiting task is cancelled.

        Returns:
            (exit code, combined stdout/stderr)
        """
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise DownloadError(
                ErrorMessages.DOWNLOAD_SPAWN_FAILED.format(
                    exec_path=self.exec_path, error=e
                )
            ) from e

        chunks: List[bytes] = []

        async def _drain() -> None:
            while True:
                chunk = await process.stdout.read(READ_CHUNK_SIZE)
                if not chunk:
                    return
                chunks.append(chunk)

        try:
            await asyncio.wait_for(
                asyncio.gather(_drain(), process.wait()),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise DownloadError(
                ErrorMessages.DOWNLOAD_TIMEOUT.format(timeout=self.timeout_seconds),
                output=_truncate(_decode(chunks)),
            ) from e
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        return process.returncode, _decode(chunks)

    async def fetch(self, url: str, destination: Path) -> Path:
        """
        Download url and write its audio track to destination.

        Raises:
            DownloadError: On spawn failure, timeout, non-zero exit or missing output
        """
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        command = self.build_command(url, destination)

        logger.info(LogMessages.FETCH_START.format(url=url, destination=destination))
        start = time.time()

        try:
            returncode, raw_output = await self._run(command)
        except DownloadError as e:
            logger.error(f"{e}")
            if e.output:
                logger.error(LogMessages.FETCH_OUTPUT.format(output=e.output))
            raise

        output = _truncate(raw_output)

        if returncode != 0:
            error_msg = ErrorMessages.DOWNLOAD_FAILED.format(code=returncode)
            logger.error(error_msg)
            logger.error(LogMessages.FETCH_OUTPUT.format(output=output))
            raise DownloadError(error_msg, output=output)

        if not destination.is_file():
            error_msg = ErrorMessages.DOWNLOAD_NO_OUTPUT.format(path=destination)
            logger.error(error_msg)
            logger.error(LogMessages.FETCH_OUTPUT.format(output=output))
            raise DownloadError(error_msg, output=output)

        size_mb = destination.stat().st_size / (1024 * 1024)
        logger.info(
            LogMessages.FETCH_DONE.format(
                video_id=destination.stem, size=size_mb, duration=time.time() - start
            )
        )
        return destination


# Global singleton instance
_fetcher: Optional[YtDlpFetcher] = None


def get_ytdlp_fetcher() -> YtDlpFetcher:
    """
    Get or create global YtDlpFetcher instance (singleton).

    Returns:
        YtDlpFetcher configured from settings
    """
    global _fetcher

    if _fetcher is None:
        settings = get_settings()
        logger.info(f"Creating YtDlpFetcher instance (exec={settings.exec_path})...")
        _fetcher = YtDlpFetcher(
            exec_path=settings.exec_path,
            audio_format=settings.audio_format,
            timeout_seconds=settings.fetch_timeout_seconds,
        )

    return _fetcher


def reset_ytdlp_fetcher() -> None:
    """Drop the singleton so the next call picks up new settings."""
    global _fetcher
    _fetcher = None
