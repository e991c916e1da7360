"""
lutube

A minimal video hosting service: uploads are stored on disk under freshly
allocated ids, and can be listed, looked up and downloaded over HTTP.
"""

__version__ = "1.0.0"

from .main import LutubeSystem

__all__ = ["LutubeSystem"]
