"""
Video Module Integration.

Wires the video subsystem together: storage-backed allocator and repository,
the application service, and the HTTP controller and routes.
"""

import logging
from typing import Optional

from fastapi import APIRouter

from ..core.config import Config
from ..storage.manager import StorageManager

# Domain interfaces
from .domain.interfaces import IdentifierAllocator, VideoRepository

# Infrastructure implementations
from .infrastructure.allocators import FileSystemIdentifierAllocator
from .infrastructure.repositories import FileSystemVideoRepository

# Application services
from .application.video_service import VideoService

# Presentation layer
from .presentation.controllers import VideoController
from .presentation.routes import create_video_routes


class VideoModule:
    """
    Main video module that provides dependency injection and service composition.

    This class follows the composition root pattern, creating and wiring up
    all dependencies for video storage and delivery.
    """

    def __init__(self, config: Config, storage_manager: Optional[StorageManager] = None):
        self.config = config
        self.storage_manager = storage_manager or StorageManager(config)
        self.logger = logging.getLogger(__name__)

        self._initialize_services()

        self.logger.info("Video module initialized successfully")

    def _initialize_services(self):
        """Initialize all video services with proper dependency injection"""

        # Infrastructure layer
        self.identifier_allocator = self._create_identifier_allocator()
        self.video_repository = self._create_video_repository()

        # Application layer
        self.video_service = VideoService(
            identifier_allocator=self.identifier_allocator,
            video_repository=self.video_repository
        )

        # Presentation layer
        self.video_controller = VideoController(self.video_service)

    def _create_identifier_allocator(self) -> IdentifierAllocator:
        return FileSystemIdentifierAllocator(self.storage_manager)

    def _create_video_repository(self) -> VideoRepository:
        return FileSystemVideoRepository(self.storage_manager)

    def get_api_routes(self) -> APIRouter:
        """Get FastAPI routes for video functionality"""
        return create_video_routes(video_controller=self.video_controller)

    def get_module_status(self) -> dict:
        """Get status information about the video module"""
        return {
            "identifier_allocator": type(self.identifier_allocator).__name__,
            "video_repository": type(self.video_repository).__name__,
            "storage_root": str(self.storage_manager.base_path),
            "chunk_size_bytes": self.config.storage.chunk_size_bytes,
            "errors": self.video_controller.error_tracker.get_error_stats()
        }


def create_video_module(config: Config, storage_manager: Optional[StorageManager] = None) -> VideoModule:
    """
    Factory function to create a configured video module.

    This is the main entry point for plugging video functionality into the API server.
    """
    return VideoModule(config=config, storage_manager=storage_manager)
