"""
Video HTTP Controllers.

Handle HTTP requests and responses for video operations, translating
store failures into HTTP status codes.
"""

import logging
import os
from typing import NoReturn

import aiofiles
from fastapi import HTTPException, UploadFile
from fastapi.responses import StreamingResponse

from ..application.video_service import VideoService
from ..domain.exceptions import (
    AllocationFailedError,
    CorruptVideoError,
    EnumerationFailedError,
    VideoNotFoundError,
    VideoStoreError,
)
from ..domain.models import Video
from ...core.logging_config import get_error_tracker
from .schemas import SlotStateResponse, VideoInfoResponse, VideoListResponse

STREAM_CHUNK_SIZE = 64 * 1024

FORMAT_TO_MIME = {".mp4": "video/mp4", ".webm": "video/webm", ".avi": "video/x-msvideo", ".mkv": "video/x-matroska"}


class VideoController:
    """Controller for video upload, lookup, catalog and delivery"""

    def __init__(self, video_service: VideoService):
        self.video_service = video_service
        self.logger = logging.getLogger(__name__)
        self.error_tracker = get_error_tracker("video_api")

    async def list_videos(self) -> VideoListResponse:
        """List every readable video"""
        try:
            videos = await self.video_service.list_videos()
        except VideoStoreError as e:
            self._raise_http(e, "list_videos")

        video_responses = [self._convert_to_response(video) for video in videos]
        return VideoListResponse(videos=video_responses, total_count=len(video_responses))

    async def get_video_info(self, video_id: str) -> VideoInfoResponse:
        """Get video information"""
        try:
            video = await self.video_service.get_video(video_id)
        except VideoStoreError as e:
            self._raise_http(e, "get_video_info")

        return self._convert_to_response(video)

    async def upload_video(self, title: str, video_file: UploadFile) -> VideoInfoResponse:
        """Store an uploaded file under a newly allocated id"""
        try:
            video = await self.video_service.publish_video(title, video_file)
        except VideoStoreError as e:
            self._raise_http(e, "upload_video")

        self.logger.info(f"Upload stored as {video.id} (filename={video_file.filename!r})")
        return self._convert_to_response(video)

    async def get_slot_state(self, video_id: str) -> SlotStateResponse:
        try:
            state = await self.video_service.get_slot_state(video_id)
        except VideoStoreError as e:
            self._raise_http(e, "get_slot_state")

        return SlotStateResponse(id=video_id, state=state.value, is_corrupt=state.is_corrupt)

    async def stream_video(self, video_id: str) -> StreamingResponse:
        """Stream the whole payload in fixed-size chunks.

        Length and bytes both come from one open handle, so a re-save while
        streaming does not change what this response sends.
        """
        try:
            payload_path = await self.video_service.get_payload_path(video_id)
            payload_file = await aiofiles.open(payload_path, "rb")
        except VideoStoreError as e:
            self._raise_http(e, "stream_video")
        except OSError as e:
            self.logger.error(f"Error opening payload for {video_id}: {e}")
            raise HTTPException(status_code=404, detail=f"Video {video_id} not found")

        try:
            size = os.fstat(payload_file.fileno()).st_size
        except OSError as e:
            await payload_file.close()
            self.error_tracker.log_error(e, "stream_video", {"video_id": video_id})
            raise HTTPException(status_code=500, detail=f"Could not read video {video_id}")

        async def generate_full():
            try:
                while True:
                    chunk = await payload_file.read(STREAM_CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk
            except OSError as e:
                self.error_tracker.log_error(e, "stream_video", {"video_id": video_id})
                raise
            finally:
                await payload_file.close()

        headers = {"Content-Length": str(size), "Cache-Control": "public, max-age=3600"}
        media_type = FORMAT_TO_MIME.get(payload_path.suffix.lower(), "application/octet-stream")
        return StreamingResponse(generate_full(), status_code=200, headers=headers, media_type=media_type)

    def _raise_http(self, error: VideoStoreError, context: str) -> NoReturn:
        """Map a store failure to an HTTP error, tracking server-side failures"""
        if isinstance(error, VideoNotFoundError):
            raise HTTPException(status_code=404, detail=str(error)) from error
        if isinstance(error, CorruptVideoError):
            self.logger.warning(str(error))
            raise HTTPException(status_code=409, detail=str(error)) from error

        self.error_tracker.log_error(error, context)
        if isinstance(error, AllocationFailedError):
            raise HTTPException(status_code=507, detail=str(error)) from error
        if isinstance(error, EnumerationFailedError):
            raise HTTPException(status_code=503, detail=str(error)) from error
        raise HTTPException(status_code=500, detail=str(error)) from error

    def _convert_to_response(self, video: Video) -> VideoInfoResponse:
        """Convert domain model to response model"""
        return VideoInfoResponse(id=video.id, title=video.title)
