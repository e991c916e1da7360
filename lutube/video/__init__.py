"""
Video Module for the lutube video hosting service.

This module provides video identity, storage and catalog capabilities
following clean architecture principles. The composition root lives in
``lutube.video.integration``.
"""

from .domain.models import Video, SlotState
from .application.video_service import VideoService

__all__ = ["Video", "SlotState", "VideoService"]
