"""
Video Presentation Layer.

Contains HTTP controllers, request/response models, and API route definitions.
"""

from .controllers import VideoController
from .schemas import VideoInfoResponse, VideoListResponse, SlotStateResponse
from .routes import create_video_routes

__all__ = [
    "VideoController",
    "VideoInfoResponse",
    "VideoListResponse",
    "SlotStateResponse",
    "create_video_routes",
]
