"""
Main Application Coordinator for the lutube video hosting service.

This module wires configuration, logging, storage and the API server together
and provides graceful startup/shutdown.
"""

import signal
import time
import logging
import sys
from typing import Optional
from datetime import datetime

from .core.config import Config
from .core.logging_config import setup_logging, get_error_tracker, get_performance_logger
from .storage.manager import StorageManager
from .video.integration import create_video_module
from .api.server import APIServer


class LutubeSystem:
    """Main application coordinator for the lutube service"""

    def __init__(self, config_file: Optional[str] = None, log_level: Optional[str] = None):
        # Load configuration first (basic logging will be used initially)
        self.config = Config(config_file)
        if log_level:
            self.config.system.log_level = log_level

        system_config = self.config.system
        self.logger_setup = setup_logging(
            log_level=system_config.log_level,
            log_file=system_config.log_file,
            max_bytes=system_config.log_max_bytes,
            backup_count=system_config.log_backup_count,
        )
        self.logger = logging.getLogger(__name__)

        self.error_tracker = get_error_tracker("main_system")
        self.performance_logger = get_performance_logger("main_system")

        self.storage_manager = StorageManager(self.config)
        self.video_module = create_video_module(self.config, self.storage_manager)
        self.api_server = APIServer(self.config, self.storage_manager, self.video_module)

        # System state
        self.running = False
        self.start_time: Optional[datetime] = None

        self._setup_signal_handlers()

        self.logger.info("lutube system initialized")

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown"""

        def signal_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, initiating graceful shutdown...")
            self.running = False

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def start(self) -> bool:
        """Start the entire system"""
        if self.running:
            self.logger.warning("System is already running")
            return True

        self.logger.info("Starting lutube...")
        self.performance_logger.start_timer("system_startup")
        self.start_time = datetime.now()

        try:
            integrity_report = self.storage_manager.verify_storage_integrity()
            inconsistent = len(integrity_report["payload_only"]) + len(integrity_report["metadata_only"])
            if inconsistent:
                self.error_tracker.log_warning(f"{inconsistent} slots have metadata without payload or payload without metadata", "storage_integrity")
            self.logger.info("Storage manager ready")
        except OSError as e:
            self.error_tracker.log_error(e, "storage_manager_init")
            self.logger.error("Failed to initialize storage manager")
            return False

        if not self.api_server.start():
            self.error_tracker.log_warning("API server not started", "api_startup")
            return False

        self.running = True
        startup_time = self.performance_logger.end_timer("system_startup")
        self.logger.info(f"lutube started successfully in {startup_time:.2f}s")
        return True

    def stop(self) -> None:
        """Stop the entire system gracefully"""
        self.logger.info("Stopping lutube...")
        self.running = False

        self.api_server.stop()

        if self.start_time:
            uptime = (datetime.now() - self.start_time).total_seconds()
            self.logger.info(f"System uptime: {uptime:.1f} seconds")

        self.logger.info("lutube stopped")

    def run(self) -> None:
        """Run the system (blocking call)"""
        if not self.start():
            self.logger.error("Failed to start system")
            return

        try:
            self.logger.info("System running... Press Ctrl+C to stop")

            while self.running and self.api_server.is_running():
                time.sleep(1)

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self.stop()

    def get_system_status(self) -> dict:
        """Get comprehensive system status"""
        return {
            "running": self.running,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "uptime_seconds": (datetime.now() - self.start_time).total_seconds() if self.start_time else 0,
            "api_server": self.api_server.get_server_info(),
            "video_module": self.video_module.get_module_status(),
            "errors": self.error_tracker.get_error_stats(),
        }

    def is_running(self) -> bool:
        """Check if system is running"""
        return self.running


def main():
    """Main entry point for the application"""
    import argparse

    parser = argparse.ArgumentParser(description="lutube video hosting service")
    parser.add_argument("--config", type=str, help="Path to configuration file", default="config.json")
    parser.add_argument("--log-level", type=str, choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Override log level", default=None)

    args = parser.parse_args()

    try:
        system = LutubeSystem(args.config, log_level=args.log_level)
        system.run()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
