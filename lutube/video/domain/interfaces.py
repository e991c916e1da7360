"""
Video Domain Interfaces.

Abstract interfaces that define contracts for video operations.
These interfaces allow dependency inversion - domain logic doesn't depend on infrastructure.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Protocol

from .exceptions import VideoNotFoundError
from .models import Video, SlotState


class PayloadSource(Protocol):
    """Sequential async byte source, e.g. an uploaded file.

    ``read`` returns ``b""`` once the source is exhausted. ``close`` may be
    a coroutine function or a plain method.
    """

    async def read(self, size: int = -1) -> bytes:
        ...

    def close(self):
        ...


async def close_payload_source(payload_source: PayloadSource) -> None:
    """Close a source whether its close method is sync or async.

    Close errors are logged, never raised.
    """
    close = getattr(payload_source, "close", None)
    if close is None:
        return
    try:
        result = close()
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logging.getLogger(__name__).warning(f"Error closing payload source: {e}")


class IdentifierAllocator(ABC):
    """Mints fresh video ids by reserving a slot for each one"""

    @abstractmethod
    async def allocate(self) -> str:
        """Reserve a new empty slot and return its id.

        Raises AllocationFailedError when the slot cannot be created.
        """
        pass


class VideoRepository(ABC):
    """Abstract repository pairing title metadata with a binary payload"""

    @abstractmethod
    async def save(self, video_id: str, title: str, payload_source: PayloadSource) -> None:
        """Write payload then metadata for an allocated id"""
        pass

    @abstractmethod
    async def load(self, video_id: str) -> str:
        """Return the stored title for an id"""
        pass

    @abstractmethod
    async def enumerate(self) -> List[Video]:
        """Return every video with a readable metadata record"""
        pass

    @abstractmethod
    async def payload_path(self, video_id: str) -> Path:
        """Location of the payload blob, for streaming by location"""
        pass

    @abstractmethod
    async def inspect(self, video_id: str) -> SlotState:
        """Classify what the slot for an id currently holds"""
        pass

    async def get(self, video_id: str) -> Optional[Video]:
        """Load a video, or None when it does not exist"""
        try:
            title = await self.load(video_id)
        except VideoNotFoundError:
            return None
        return Video(id=video_id, title=title)
