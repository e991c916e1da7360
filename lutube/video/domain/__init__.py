"""
Video Domain Layer.

Contains pure business logic and domain models for video operations.
No external dependencies - only Python standard library and domain concepts.
"""

from .models import Video, SlotState
from .interfaces import IdentifierAllocator, VideoRepository, PayloadSource, close_payload_source
from .exceptions import (
    VideoStoreError,
    AllocationFailedError,
    WriteFailedError,
    VideoNotFoundError,
    CorruptVideoError,
    EnumerationFailedError,
)

__all__ = [
    "Video",
    "SlotState",
    "IdentifierAllocator",
    "VideoRepository",
    "PayloadSource",
    "close_payload_source",
    "VideoStoreError",
    "AllocationFailedError",
    "WriteFailedError",
    "VideoNotFoundError",
    "CorruptVideoError",
    "EnumerationFailedError",
]
