"""Centralized error and log message templates for the MP3 host service."""


class ErrorMessages:
    """Centralized error message templates."""

    # Client-facing (response bodies)
    METHOD_NOT_ALLOWED = "Method not allowed"
    URL_NOT_PROVIDED = "URL not provided"
    INVALID_URL = "Invalid URL"
    BAD_URL = "Bad URL"
    INTERNAL_ERROR = "Internal server error"
    BODY_READ_FAILED = "Error reading request body"

    # Downloader
    DOWNLOAD_FAILED = "Downloader exited with code {code}"
    DOWNLOAD_SPAWN_FAILED = "Failed to start downloader {exec_path}: {error}"
    DOWNLOAD_TIMEOUT = "Downloader timed out after {timeout}s"
    DOWNLOAD_NO_OUTPUT = "Downloader reported success but produced no file at {path}"
    DOWNLOAD_CANCELLED = "Download of {video_id} was cancelled before it finished"

    # Store
    STORE_WALK_FAILED = "Failed to scan store {path}: {error}"
    STORE_REMOVE_FAILED = "Failed to remove {path}: {error}"
    STORE_COMMIT_FAILED = "Failed to move {src} into place at {dst}: {error}"
    STORE_EMPTY = "No {ext} files found in {path}"

    # Dependencies
    EXECUTABLE_NOT_FOUND = "Downloader executable not found: {path}"


class LogMessages:
    """Centralized log message templates."""

    # Requests
    VIDEO_ID = "Video ID: {video_id}"
    CACHE_HIT = "File {path} exists, serving cached artifact"
    CACHE_MISS = "File {path} does not exist, fetching"
    FETCH_JOINED = "Fetch for {video_id} already in flight, waiting on it"

    # Downloader
    FETCH_START = "Running downloader for {url} -> {destination}"
    FETCH_DONE = "Downloaded {video_id} ({size:.2f}MB) in {duration:.2f}s"
    FETCH_OUTPUT = "Downloader output:\n{output}"

    # Eviction
    EVICTING = "Folder size is {total} bytes (budget {budget}). Deleting: {path}"
    EVICTION_SKIPPED = "Folder size is {total} bytes, within budget {budget}"
    EVICTION_STILL_OVER = (
        "Store still over budget after {count} eviction(s): {total} > {budget} bytes"
    )
