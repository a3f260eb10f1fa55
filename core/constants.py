"""Constants for the MP3 host service."""

BYTES_PER_MB = 1024 * 1024


# =============================================================================
# URL Handling
# =============================================================================

# Request body must fully match this before any identifier extraction
URL_SHAPE_PATTERN = r'^(http|https)://[^ "]+$'

# Short-host form: the path segment is the identifier
SHORT_URL_PATTERN = r"^https://youtu\.be/([a-zA-Z0-9_-]+)$"

# Query parameter carrying the identifier on the long-host form
VIDEO_ID_QUERY_PARAM = "v"


# =============================================================================
# Artifact Store
# =============================================================================

DEFAULT_AUDIO_FORMAT = "mp3"

# Hidden directory under the store root where downloads land before the
# atomic rename; excluded from artifact listings
STAGING_DIR_NAME = ".staging"

# Public route prefix for static serving of the store
FILES_ROUTE_PREFIX = "/files"


# =============================================================================
# Downloader
# =============================================================================

# Max characters of downloader output kept in logs and DownloadError
DOWNLOAD_OUTPUT_LOG_LIMIT = 4000


# =============================================================================
# HTTP
# =============================================================================

CORS_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Headers": "Content-Type",
}


# =============================================================================
# Config File
# =============================================================================

# JSON config file key -> Settings field name
CONFIG_FILE_KEYS = {
    "host": "api_host",
    "port": "api_port",
    "filesDir": "files_dir",
    "dirSizeMaxMB": "dir_size_max_mb",
    "execPath": "exec_path",
    "execDir": "exec_path",
    "audioFormat": "audio_format",
    "maxEvictionsPerPass": "max_evictions_per_pass",
    "fetchTimeoutSeconds": "fetch_timeout_seconds",
    "logLevel": "log_level",
    "logFormat": "log_format",
}
