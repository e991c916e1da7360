"""
Video API Routes.

FastAPI route definitions for video upload, lookup, catalog and delivery.
"""

from fastapi import APIRouter, File, Form, UploadFile

from .controllers import VideoController
from .schemas import SlotStateResponse, VideoInfoResponse, VideoListResponse


def create_video_routes(video_controller: VideoController) -> APIRouter:
    """Create video API routes with dependency injection"""

    router = APIRouter(prefix="/videos", tags=["videos"])

    @router.get("/", response_model=VideoListResponse)
    async def list_videos():
        """
        List every stored video.

        Entries whose metadata cannot be read are left out rather than
        failing the whole listing. No ordering is guaranteed.
        """
        return await video_controller.list_videos()

    @router.post("/", response_model=VideoInfoResponse, status_code=201)
    async def upload_video(
        title: str = Form(..., description="Video title, stored verbatim"),
        video_file: UploadFile = File(..., alias="video-file", description="Video file to store")
    ):
        """
        Upload a video under a newly allocated id.

        - **title**: Free-form title
        - **video-file**: The video payload

        Returns the id and title of the stored video.
        """
        return await video_controller.upload_video(title, video_file)

    @router.get("/{video_id}", response_model=VideoInfoResponse)
    async def get_video_info(video_id: str):
        """
        Get the title stored for a video.

        - **video_id**: Unique identifier returned at upload
        """
        return await video_controller.get_video_info(video_id)

    @router.get("/{video_id}/file")
    async def stream_video(video_id: str):
        """
        Download the stored payload.

        Usage in HTML5:
        ```html
        <video controls>
            <source src="/videos/{video_id}/file" type="video/mp4">
        </video>
        ```
        """
        return await video_controller.stream_video(video_id)

    @router.get("/{video_id}/state", response_model=SlotStateResponse)
    async def get_slot_state(video_id: str):
        """
        Report which of metadata and payload are present for a slot.
        """
        return await video_controller.get_slot_state(video_id)

    return router
