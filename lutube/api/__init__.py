"""
API module for the lutube video hosting service.

This module provides the REST API server for uploading, listing and downloading videos.
"""

from .server import APIServer

__all__ = ["APIServer"]
