"""
Data models for the lutube API.

This module defines Pydantic models for API responses outside the video routes.
"""

from typing import Dict, List, Optional, Any
from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Generic success response"""

    success: bool = True
    message: str
    data: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Liveness response"""

    status: str
    timestamp: str


class SystemStatusResponse(BaseModel):
    """Server and video module status"""

    running: bool
    start_time: str
    uptime_seconds: float
    video_module: Dict[str, Any]


class DiskUsageResponse(BaseModel):
    """Disk usage for the filesystem holding the storage root"""

    total_bytes: int
    used_bytes: int
    free_bytes: int
    used_percent: float


class StorageStatsResponse(BaseModel):
    """Storage statistics response model"""

    base_path: str
    total_slots: int
    total_videos: int
    total_size_bytes: int
    slot_states: Dict[str, int]
    disk_usage: DiskUsageResponse


class IntegrityReportResponse(BaseModel):
    """Slots whose metadata and payload are not both present"""

    total_slots: int
    complete: int
    empty_slots: List[str]
    payload_only: List[str]
    metadata_only: List[str]
    stale_part_files: List[str]
