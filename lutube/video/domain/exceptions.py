"""
Video Domain Exceptions.

Failure kinds raised by the identifier allocator and video store. Storage-layer
errors are wrapped into one of these and chained to the original exception.
"""


class VideoStoreError(RuntimeError):
    """Base exception raised when a store operation fails."""


class AllocationFailedError(VideoStoreError):
    """Raised when a new slot cannot be reserved."""


class WriteFailedError(VideoStoreError):
    """Raised when a payload or metadata write does not complete."""

    def __init__(self, video_id: str, message: str):
        super().__init__(f"Could not save video {video_id}: {message}")
        self.video_id = video_id


class VideoNotFoundError(VideoStoreError):
    """Raised when no metadata record exists for an id."""

    def __init__(self, video_id: str):
        super().__init__(f"Video {video_id} not found")
        self.video_id = video_id


class CorruptVideoError(VideoStoreError):
    """Raised when a slot's metadata and payload are inconsistent or unreadable."""

    def __init__(self, video_id: str, message: str):
        super().__init__(f"Video {video_id} is corrupt: {message}")
        self.video_id = video_id


class EnumerationFailedError(VideoStoreError):
    """Raised when the storage namespace itself cannot be listed."""
