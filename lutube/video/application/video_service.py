"""
Video Application Service.

Orchestrates video-related use cases: publishing an upload under a fresh id,
looking a video up, building the catalog, and locating payloads for delivery.
"""

import logging
from pathlib import Path
from typing import List

from ..domain.exceptions import AllocationFailedError, VideoNotFoundError
from ..domain.interfaces import IdentifierAllocator, PayloadSource, VideoRepository, close_payload_source
from ..domain.models import SlotState, Video
from ...core.logging_config import get_performance_logger


class VideoService:
    """Application service for video management"""

    def __init__(
        self,
        identifier_allocator: IdentifierAllocator,
        video_repository: VideoRepository
    ):
        self.identifier_allocator = identifier_allocator
        self.video_repository = video_repository
        self.logger = logging.getLogger(__name__)
        self.upload_timer = get_performance_logger("upload")

    async def publish_video(self, title: str, payload_source: PayloadSource) -> Video:
        """Reserve an id and store the upload under it.

        Raises AllocationFailedError or WriteFailedError. If allocation fails
        the source is still closed. A failed save leaves the empty slot behind.
        """
        try:
            video_id = await self.identifier_allocator.allocate()
        except AllocationFailedError:
            await close_payload_source(payload_source)
            raise

        operation = f"save {video_id}"
        self.upload_timer.start_timer(operation)
        succeeded = False
        try:
            await self.video_repository.save(video_id, title, payload_source)
            succeeded = True
        finally:
            self.upload_timer.end_timer(operation, succeeded=succeeded)

        return Video(id=video_id, title=title)

    async def get_video(self, video_id: str) -> Video:
        """Get a video by ID, raising VideoNotFoundError when absent"""
        video = await self.video_repository.get(video_id)
        if video is None:
            raise VideoNotFoundError(video_id)
        return video

    async def list_videos(self) -> List[Video]:
        """Catalog of all readable videos"""
        videos = await self.video_repository.enumerate()
        self.logger.debug(f"Catalog built with {len(videos)} videos")
        return videos

    async def get_payload_path(self, video_id: str) -> Path:
        """Payload location for a video that has committed metadata.

        Payload without metadata is an unfinished save and is not served.
        """
        await self.video_repository.load(video_id)
        return await self.video_repository.payload_path(video_id)

    async def get_slot_state(self, video_id: str) -> SlotState:
        return await self.video_repository.inspect(video_id)
