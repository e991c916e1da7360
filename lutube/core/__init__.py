"""
lutube - Core Module

This module contains configuration management and logging setup
shared by the storage, video and API layers.
"""

from .config import Config, StorageConfig, SystemConfig
from .logging_config import setup_logging, get_error_tracker, get_performance_logger

__all__ = ["Config", "StorageConfig", "SystemConfig", "setup_logging", "get_error_tracker", "get_performance_logger"]
