"""
Service Layer - Business logic for the MP3 host.
"""

from .eviction import EvictionPolicy
from .identifier import extract_video_id, is_valid_url, parse_request_url
from .inflight import InFlightRegistry
from .mp3_service import FetchOutcome, Mp3Service

__all__ = [
    "EvictionPolicy",
    "InFlightRegistry",
    "FetchOutcome",
    "Mp3Service",
    "extract_video_id",
    "is_valid_url",
    "parse_request_url",
]
