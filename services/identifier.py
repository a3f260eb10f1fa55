"""
Video identifier extraction.

Pure string and URL parsing, no network access. The identifier is both the
cache key and the artifact filename stem.
"""

import re
from urllib.parse import parse_qs, urlsplit

from core.constants import SHORT_URL_PATTERN, URL_SHAPE_PATTERN, VIDEO_ID_QUERY_PARAM
from core.errors import InvalidURLError, UnrecognizedVideoURLError
from core.logger import logger
from core.messages import ErrorMessages, LogMessages

_URL_SHAPE_RE = re.compile(URL_SHAPE_PATTERN)
_SHORT_URL_RE = re.compile(SHORT_URL_PATTERN)
# Identifiers end up in filenames: no separators, no dots
_SAFE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def is_valid_url(url: str) -> bool:
    """Check the raw http(s) URL shape."""
    return _URL_SHAPE_RE.match(url) is not None


def extract_video_id(url: str) -> str:
    """
    Derive the video identifier from a URL.

    Recognizes ``https://youtu.be/<id>`` and any URL carrying a ``v`` query
    parameter. Returns an empty string when neither applies; never raises.
    """
    match = _SHORT_URL_RE.match(url)
    if match:
        return match.group(1)

    try:
        query = urlsplit(url).query
    except ValueError as e:
        logger.debug(f"Error parsing URL: {e}")
        return ""

    values = parse_qs(query).get(VIDEO_ID_QUERY_PARAM)
    if not values:
        return ""

    video_id = values[0]
    if not _SAFE_ID_RE.match(video_id):
        return ""
    return video_id


def parse_request_url(raw: str) -> str:
    """
    Validate a request body and return its video identifier.

    Raises:
        InvalidURLError: If the body is not an http(s) URL
        UnrecognizedVideoURLError: If no identifier can be derived
    """
    url = raw.strip()
    if not is_valid_url(url):
        raise InvalidURLError(ErrorMessages.INVALID_URL)

    video_id = extract_video_id(url)
    if not video_id:
        raise UnrecognizedVideoURLError(ErrorMessages.BAD_URL)

    logger.info(LogMessages.VIDEO_ID.format(video_id=video_id))
    return video_id
