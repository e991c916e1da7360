"""
Identifier Allocator Implementations.

Reserves slots with the filesystem's exclusive directory creation, so
uniqueness holds across tasks, threads and processes without any locking.
"""

import logging
import uuid
from typing import Callable

from ..domain.exceptions import AllocationFailedError
from ..domain.interfaces import IdentifierAllocator
from ...storage.manager import StorageManager


def random_slot_name() -> str:
    return uuid.uuid4().hex


class FileSystemIdentifierAllocator(IdentifierAllocator):
    """Allocator creating one directory per id under the storage root"""

    def __init__(self, storage_manager: StorageManager, name_factory: Callable[[], str] = random_slot_name):
        self.storage_manager = storage_manager
        self.name_factory = name_factory
        self.max_attempts = storage_manager.storage_config.allocation_attempts
        self.logger = logging.getLogger(__name__)

    async def allocate(self) -> str:
        """Reserve a new empty slot and return its id"""
        for attempt in range(1, self.max_attempts + 1):
            video_id = self.name_factory()
            try:
                await self.storage_manager.create_slot(video_id)
            except FileExistsError:
                # Name taken by an existing or concurrently created slot; draw another
                self.logger.debug(f"Slot name collision on {video_id} (attempt {attempt}/{self.max_attempts})")
                continue
            except ValueError as e:
                raise AllocationFailedError(f"Generated an unusable slot name {video_id!r}") from e
            except OSError as e:
                self.logger.error(f"Could not create slot {video_id}: {e}")
                raise AllocationFailedError(f"Could not create slot: {e}") from e

            self.logger.info(f"Allocated video id {video_id}")
            return video_id

        raise AllocationFailedError(f"No free slot name after {self.max_attempts} attempts")
