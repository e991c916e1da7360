"""
FastAPI Server for the lutube video hosting service.

This module assembles the REST API and runs it under uvicorn.
"""

import logging
import threading
from typing import Dict, Optional, Any
from datetime import datetime

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from ..core.config import Config
from ..storage.manager import StorageManager
from ..video.integration import VideoModule, create_video_module
from .models import (
    HealthResponse,
    IntegrityReportResponse,
    StorageStatsResponse,
    SuccessResponse,
    SystemStatusResponse,
)


class APIServer:
    """FastAPI server for the lutube video hosting service"""

    def __init__(self, config: Config, storage_manager: StorageManager, video_module: Optional[VideoModule] = None):
        self.config = config
        self.storage_manager = storage_manager
        self.video_module = video_module or create_video_module(config, storage_manager)
        self.logger = logging.getLogger(__name__)

        self.app = FastAPI(title="lutube API", description="Upload, list and download videos", version="1.0.0")

        # Server state
        self.server_start_time = datetime.now()
        self.running = False
        self._server: Optional[uvicorn.Server] = None
        self._server_thread: Optional[threading.Thread] = None

        self.app.add_middleware(CORSMiddleware, allow_origins=self.config.system.cors_allow_origins, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes"""

        @self.app.get("/", response_model=SuccessResponse)
        async def root():
            return SuccessResponse(message="lutube API")

        @self.app.get("/health", response_model=HealthResponse)
        async def health_check():
            return HealthResponse(status="healthy", timestamp=datetime.now().isoformat())

        @self.app.get("/system/status", response_model=SystemStatusResponse)
        async def get_system_status():
            """Get server uptime and video module wiring"""
            uptime = (datetime.now() - self.server_start_time).total_seconds()
            return SystemStatusResponse(running=self.running, start_time=self.server_start_time.isoformat(), uptime_seconds=uptime, video_module=self.video_module.get_module_status())

        # Sync handlers: FastAPI runs them in its threadpool, off the event loop
        @self.app.get("/storage/stats", response_model=StorageStatsResponse)
        def get_storage_stats():
            """Get storage statistics"""
            try:
                return StorageStatsResponse(**self.storage_manager.get_storage_statistics())
            except OSError as e:
                self.logger.error(f"Error getting storage stats: {e}")
                raise HTTPException(status_code=503, detail=str(e))

        @self.app.get("/storage/integrity", response_model=IntegrityReportResponse)
        def get_storage_integrity():
            """List slots with missing metadata or payload"""
            try:
                return IntegrityReportResponse(**self.storage_manager.verify_storage_integrity())
            except OSError as e:
                self.logger.error(f"Error during integrity check: {e}")
                raise HTTPException(status_code=503, detail=str(e))

        self.app.include_router(self.video_module.get_api_routes())

    def start(self) -> bool:
        """Start the API server"""
        if self.running:
            self.logger.warning("API server is already running")
            return True

        if not self.config.system.enable_api:
            self.logger.info("API server disabled in configuration")
            return False

        try:
            self.logger.info(f"Starting API server on {self.config.system.api_host}:{self.config.system.api_port}")
            uvicorn_config = uvicorn.Config(self.app, host=self.config.system.api_host, port=self.config.system.api_port, log_level="info")
            self._server = uvicorn.Server(uvicorn_config)
            self.running = True

            # Start server in separate thread
            self._server_thread = threading.Thread(target=self._run_server, daemon=True)
            self._server_thread.start()

            return True

        except Exception as e:
            self.logger.error(f"Error starting API server: {e}")
            self.running = False
            return False

    def stop(self) -> None:
        """Stop the API server"""
        if not self.running:
            return

        self.logger.info("Stopping API server...")
        if self._server is not None:
            self._server.should_exit = True
        if self._server_thread is not None:
            self._server_thread.join(timeout=10)
        self.running = False

        self.logger.info("API server stopped")

    def _run_server(self) -> None:
        """Run the uvicorn server"""
        try:
            self._server.run()
        except Exception as e:
            self.logger.error(f"Error running API server: {e}")
        finally:
            self.running = False

    def is_running(self) -> bool:
        """Check if API server is running"""
        return self.running

    def get_server_info(self) -> Dict[str, Any]:
        """Get server information"""
        return {"running": self.running, "host": self.config.system.api_host, "port": self.config.system.api_port, "start_time": self.server_start_time.isoformat(), "uptime_seconds": (datetime.now() - self.server_start_time).total_seconds()}
