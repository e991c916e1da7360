"""
Video Repository Implementations.

File system-based implementation of the video repository interface.

Each save writes the payload first and the metadata second. Both go to a
hidden ``.part`` file that is fsynced and then renamed over the final name.
The slot directory is fsynced after each rename, so a metadata file only
ever appears once its payload is fully on disk. Metadata presence is
therefore the marker that a video exists.
"""

import asyncio
import logging
import os
import uuid
from pathlib import Path
from typing import AsyncIterator, List

import aiofiles
import aiofiles.os

from ..domain.exceptions import (
    CorruptVideoError,
    EnumerationFailedError,
    VideoNotFoundError,
    VideoStoreError,
    WriteFailedError,
)
from ..domain.interfaces import PayloadSource, VideoRepository, close_payload_source
from ..domain.models import SlotState, Video
from ...storage.manager import PART_SUFFIX, StorageManager


class FileSystemVideoRepository(VideoRepository):
    """File system implementation of video repository"""

    def __init__(self, storage_manager: StorageManager):
        self.storage_manager = storage_manager
        self.chunk_size = storage_manager.storage_config.chunk_size_bytes
        self.logger = logging.getLogger(__name__)

    async def save(self, video_id: str, title: str, payload_source: PayloadSource) -> None:
        """Write payload then metadata for an allocated id.

        The source is closed on every exit path. Raises WriteFailedError when
        the id was never allocated, the source fails, or either write fails.
        """
        try:
            try:
                slot = self.storage_manager.slot_path(video_id)
            except ValueError as e:
                raise WriteFailedError(video_id, "invalid video id") from e

            if not await aiofiles.os.path.isdir(slot):
                raise WriteFailedError(video_id, "slot has not been allocated")

            try:
                size = await self._write_atomically(self.storage_manager.payload_path(video_id), self._drain(video_id, payload_source))
            except OSError as e:
                self.logger.error(f"Payload write failed for {video_id}: {e}")
                raise WriteFailedError(video_id, f"payload write failed: {e}") from e

            try:
                await self._write_atomically(self.storage_manager.metadata_path(video_id), self._single_chunk(title.encode("utf-8")))
            except (OSError, UnicodeEncodeError) as e:
                # The payload stays behind without metadata; the integrity report lists it
                self.logger.error(f"Metadata write failed for {video_id}, payload left orphaned: {e}")
                raise WriteFailedError(video_id, f"metadata write failed: {e}") from e

            self.logger.info(f"Saved video {video_id} ({size} bytes)")
        finally:
            await close_payload_source(payload_source)

    async def load(self, video_id: str) -> str:
        """Return the stored title for an id"""
        try:
            metadata_path = self.storage_manager.metadata_path(video_id)
        except ValueError as e:
            raise VideoNotFoundError(video_id) from e

        try:
            async with aiofiles.open(metadata_path, "rb") as f:
                data = await f.read()
        except OSError as e:
            raise VideoNotFoundError(video_id) from e

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptVideoError(video_id, "metadata is not valid UTF-8") from e

    async def enumerate(self) -> List[Video]:
        """Return every video with a readable metadata record.

        Slots that fail to load are skipped. Order follows the directory listing.
        """
        try:
            slots = await self.storage_manager.list_slots()
        except OSError as e:
            self.logger.error(f"Could not list storage root {self.storage_manager.base_path}: {e}")
            raise EnumerationFailedError(f"Could not list videos: {e}") from e

        results = await asyncio.gather(*(self.load(video_id) for video_id in slots), return_exceptions=True)

        videos = []
        for video_id, result in zip(slots, results):
            if isinstance(result, VideoStoreError):
                self.logger.debug(f"Skipping {video_id} in catalog: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            videos.append(Video(id=video_id, title=result))
        return videos

    async def payload_path(self, video_id: str) -> Path:
        """Location of the payload blob"""
        try:
            path = self.storage_manager.payload_path(video_id)
        except ValueError as e:
            raise VideoNotFoundError(video_id) from e

        if not await aiofiles.os.path.isfile(path):
            raise VideoNotFoundError(video_id)
        return path

    async def inspect(self, video_id: str) -> SlotState:
        """Classify what the slot for an id currently holds"""
        if not await self.storage_manager.slot_exists(video_id):
            raise VideoNotFoundError(video_id)
        return await self.storage_manager.slot_state(video_id)

    async def _drain(self, video_id: str, payload_source: PayloadSource) -> AsyncIterator[bytes]:
        """Yield the source in chunks until it reports end of stream"""
        while True:
            try:
                chunk = await payload_source.read(self.chunk_size)
            except Exception as e:
                raise WriteFailedError(video_id, f"payload stream failed: {e}") from e
            if not chunk:
                return
            yield chunk

    @staticmethod
    async def _single_chunk(data: bytes) -> AsyncIterator[bytes]:
        yield data

    async def _write_atomically(self, final_path: Path, chunks: AsyncIterator[bytes]) -> int:
        """Stream chunks to a hidden temp file, fsync it, then rename over final_path"""
        temp_path = final_path.with_name(f".{final_path.name}.{uuid.uuid4().hex}{PART_SUFFIX}")
        written = 0
        committed = False
        try:
            async with aiofiles.open(temp_path, "wb") as f:
                async for chunk in chunks:
                    await f.write(chunk)
                    written += len(chunk)
                await f.flush()
                await asyncio.to_thread(os.fsync, f.fileno())
            await aiofiles.os.replace(temp_path, final_path)
            committed = True
        finally:
            if not committed:
                await self._discard(temp_path)
        # Make the rename itself durable
        await self.storage_manager.sync_directory(final_path.parent)
        return written

    async def _discard(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not remove partial file {path}: {e}")

