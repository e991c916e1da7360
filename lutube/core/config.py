"""
Configuration management for the lutube video hosting service.

This module handles all configuration settings including storage layout,
API server settings, and logging parameters.
"""

import json
import logging
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, asdict, field
from pathlib import Path


@dataclass
class StorageConfig:
    """Storage configuration"""

    base_path: str = "videos"
    payload_filename: str = "video.mp4"  # Binary payload inside each slot
    metadata_filename: str = "videodata.txt"  # Title, stored verbatim
    chunk_size_bytes: int = 1024 * 1024  # Read size when draining upload streams
    allocation_attempts: int = 8  # Fresh names tried before giving up on a slot

    def __post_init__(self):
        if self.chunk_size_bytes <= 0:
            raise ValueError("chunk_size_bytes must be positive")
        if self.allocation_attempts <= 0:
            raise ValueError("allocation_attempts must be positive")
        if self.payload_filename == self.metadata_filename:
            raise ValueError("payload and metadata files must have different names")


@dataclass
class SystemConfig:
    """System-wide configuration"""

    log_level: str = "INFO"
    log_file: Optional[str] = "lutube.log"
    log_max_bytes: int = 10 * 1024 * 1024  # Rotate the log file past this size
    log_backup_count: int = 5
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    enable_api: bool = True
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])


class Config:
    """Main configuration manager"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or "config.json"
        self.logger = logging.getLogger(__name__)

        # Default configurations
        self.storage = StorageConfig()
        self.system = SystemConfig()

        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file"""
        config_path = Path(self.config_file)

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    config_data = json.load(f)

                if "storage" in config_data:
                    self.storage = StorageConfig(**config_data["storage"])

                if "system" in config_data:
                    self.system = SystemConfig(**config_data["system"])

                self.logger.info(f"Configuration loaded from {config_path}")

            except (OSError, ValueError, TypeError) as e:
                self.logger.error(f"Error loading config from {config_path}: {e}")
                self.storage = StorageConfig()
                self.system = SystemConfig()
        else:
            self.logger.info(f"Config file {config_path} not found, using defaults")
            self.save_config()  # Save default config

    def save_config(self) -> None:
        """Save current configuration to file"""
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            self.logger.info(f"Configuration saved to {self.config_file}")
        except OSError as e:
            self.logger.error(f"Error saving config to {self.config_file}: {e}")

    def update_storage_config(self, **kwargs) -> bool:
        """Update storage configuration"""
        unknown = [key for key in kwargs if not hasattr(self.storage, key)]
        if unknown:
            self.logger.warning(f"Ignoring unknown storage settings: {unknown}")
            return False

        self.storage = StorageConfig(**{**asdict(self.storage), **kwargs})
        self.save_config()
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {"storage": asdict(self.storage), "system": asdict(self.system)}
