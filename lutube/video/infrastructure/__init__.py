"""
Video Infrastructure Layer.

Contains implementations of domain interfaces backed by the local file system.
"""

from .allocators import FileSystemIdentifierAllocator
from .repositories import FileSystemVideoRepository

__all__ = [
    "FileSystemIdentifierAllocator",
    "FileSystemVideoRepository",
]
