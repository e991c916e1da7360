"""
Storage module for the lutube video hosting service.

This module handles slot layout, namespace listing, and integrity reporting for stored videos.
"""

from .manager import StorageManager

__all__ = ["StorageManager"]
