"""
Unit tests for YtDlpFetcher.

A small shell script stands in for yt-dlp: it resolves the -o template the
way the real tool does and then behaves as each test needs (write the file,
fail, hang, print a lot).
"""

import asyncio
import sys
import time

import pytest

from core.errors import DownloadError
from infrastructure.ytdlp.fetcher import YtDlpFetcher

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs /bin/sh")

# argv: <url> -x --audio-format <fmt> -o <dir>/<id>.%(ext)s
SCRIPT_HEADER = """#!/bin/sh
out=$(printf '%s' "$6" | sed 's/%(ext)s$//')
"""

WRITE_OUTPUT = """printf 'ID3' > "${out}$4"
"""


def fake_tool(tmp_path, body: str) -> str:
    """Write an executable stand-in for yt-dlp and return its path."""
    path = tmp_path / "fake-yt-dlp"
    path.write_text(SCRIPT_HEADER + body)
    path.chmod(0o755)
    return str(path)


class TestBuildCommand:
    """Tests for the downloader argv"""

    def test_command_shape(self, tmp_path):
        fetcher = YtDlpFetcher("/opt/yt-dlp")
        destination = tmp_path / "abc123.mp3"

        command = fetcher.build_command("https://youtu.be/abc123", destination)

        assert command == [
            "/opt/yt-dlp",
            "https://youtu.be/abc123",
            "-x",
            "--audio-format",
            "mp3",
            "-o",
            str(tmp_path / "abc123") + ".%(ext)s",
        ]

    def test_audio_format_is_configurable(self, tmp_path):
        command = YtDlpFetcher("yt-dlp", audio_format="m4a").build_command(
            "https://youtu.be/x", tmp_path / "x.m4a"
        )
        assert command[command.index("--audio-format") + 1] == "m4a"


class TestFetch:
    """Tests for fetch()"""

    @pytest.mark.asyncio
    async def test_success_returns_destination(self, tmp_path):
        fetcher = YtDlpFetcher(fake_tool(tmp_path, "echo '[download] 100%'\n" + WRITE_OUTPUT))
        destination = tmp_path / "staging" / "abc123.mp3"

        result = await fetcher.fetch("https://youtu.be/abc123", destination)

        assert result == destination
        assert destination.read_bytes() == b"ID3"

    @pytest.mark.asyncio
    async def test_non_zero_exit_raises_with_output(self, tmp_path):
        fetcher = YtDlpFetcher(fake_tool(tmp_path, "echo 'ERROR: Video unavailable'\nexit 1\n"))

        with pytest.raises(DownloadError) as exc_info:
            await fetcher.fetch("https://youtu.be/gone", tmp_path / "gone.mp3")

        assert "code 1" in str(exc_info.value)
        assert "Video unavailable" in exc_info.value.output

    @pytest.mark.asyncio
    async def test_stderr_is_captured(self, tmp_path):
        fetcher = YtDlpFetcher(fake_tool(tmp_path, "echo 'ffmpeg not found' >&2\nexit 1\n"))

        with pytest.raises(DownloadError) as exc_info:
            await fetcher.fetch("https://youtu.be/x", tmp_path / "x.mp3")

        assert "ffmpeg not found" in exc_info.value.output

    @pytest.mark.asyncio
    async def test_zero_exit_without_file_raises(self, tmp_path):
        fetcher = YtDlpFetcher(fake_tool(tmp_path, "echo done\n"))

        with pytest.raises(DownloadError, match="produced no file"):
            await fetcher.fetch("https://youtu.be/abc", tmp_path / "abc.mp3")

    @pytest.mark.asyncio
    async def test_spawn_failure_raises(self, tmp_path):
        fetcher = YtDlpFetcher(str(tmp_path / "missing-yt-dlp"))

        with pytest.raises(DownloadError, match="Failed to start downloader"):
            await fetcher.fetch("https://youtu.be/abc", tmp_path / "abc.mp3")

    @pytest.mark.asyncio
    async def test_timeout_kills_and_keeps_partial_output(self, tmp_path):
        body = "printf '[download] 12%%\\377\\n'\nexec sleep 5\n"
        fetcher = YtDlpFetcher(fake_tool(tmp_path, body), timeout_seconds=0.5)

        start = time.monotonic()
        with pytest.raises(DownloadError, match="timed out") as exc_info:
            await fetcher.fetch("https://youtu.be/slow", tmp_path / "slow.mp3")

        assert time.monotonic() - start < 3
        assert "[download] 12%" in exc_info.value.output
        # Undecodable bytes are replaced, not dropped with the rest
        assert "�" in exc_info.value.output

    @pytest.mark.asyncio
    async def test_long_output_is_truncated(self, tmp_path):
        body = (
            "i=0\n"
            "while [ $i -lt 300 ]; do echo xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx; i=$((i+1)); done\n"
            "echo TAIL\n"
            "exit 2\n"
        )
        fetcher = YtDlpFetcher(fake_tool(tmp_path, body))

        with pytest.raises(DownloadError) as exc_info:
            await fetcher.fetch("https://youtu.be/noisy", tmp_path / "noisy.mp3")

        assert exc_info.value.output.rstrip().endswith("TAIL")
        assert exc_info.value.output.startswith("...")
        assert len(exc_info.value.output) < 300 * 41


class TestConcurrency:
    """Downloads of different videos run side by side"""

    @pytest.mark.asyncio
    async def test_many_slow_downloads_run_in_parallel(self, tmp_path):
        fetcher = YtDlpFetcher(fake_tool(tmp_path, "sleep 1\n" + WRITE_OUTPUT))
        destinations = [tmp_path / "staging" / f"video{i}.mp3" for i in range(8)]

        start = time.monotonic()
        results = await asyncio.gather(
            *(fetcher.fetch(f"https://youtu.be/video{i}", d) for i, d in enumerate(destinations))
        )
        elapsed = time.monotonic() - start

        assert results == destinations
        assert all(d.read_bytes() == b"ID3" for d in destinations)
        assert elapsed < 1.8
