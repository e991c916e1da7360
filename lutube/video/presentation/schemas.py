"""
Video API Request/Response Schemas.

Pydantic models for API serialization and validation.
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field


class VideoInfoResponse(BaseModel):
    """Video information response"""
    id: str = Field(..., description="Unique video identifier")
    title: str = Field(..., description="Title given at upload")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "3f2b9c0e1d8a4b6c9e7f5a3d2c1b0a98",
                "title": "My Trip"
            }
        }
    )


class VideoListResponse(BaseModel):
    """Video catalog response"""
    videos: List[VideoInfoResponse] = Field(..., description="List of videos")
    total_count: int = Field(..., description="Total number of videos")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "videos": [],
                "total_count": 0
            }
        }
    )


class SlotStateResponse(BaseModel):
    """Storage state of a single slot"""
    id: str = Field(..., description="Unique video identifier")
    state: str = Field(..., description="complete, empty, payload_only or metadata_only")
    is_corrupt: bool = Field(..., description="Whether metadata and payload disagree")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "3f2b9c0e1d8a4b6c9e7f5a3d2c1b0a98",
                "state": "complete",
                "is_corrupt": False
            }
        }
    )
