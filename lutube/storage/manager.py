"""
Storage Manager for the lutube video hosting service.

This module owns the on-disk namespace: one directory ("slot") per video,
holding a payload blob and a metadata file. It validates slot names, derives
locations from ids, and reports on storage usage and integrity.
"""

import asyncio
import os
import logging
import shutil
from typing import Dict, List, Any
from pathlib import Path

import aiofiles.os

from ..core.config import Config
from ..video.domain.models import SlotState

PART_SUFFIX = ".part"


def _fsync_directory(path: Path) -> None:
    fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class StorageManager:
    """Manages slot layout and the storage root for uploaded videos"""

    def __init__(self, config: Config):
        self.config = config
        self.storage_config = config.storage
        self.base_path = Path(self.storage_config.base_path)
        self.logger = logging.getLogger(__name__)

        self._ensure_storage_structure()

    def _ensure_storage_structure(self) -> None:
        """Ensure storage directory structure exists"""
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            self.logger.info(f"Storage root verified: {self.base_path}")
        except OSError as e:
            self.logger.error(f"Error creating storage structure: {e}")
            raise

    # ------------------------------------------------------------------ #
    # Slot layout                                                        #
    # ------------------------------------------------------------------ #
    @staticmethod
    def is_valid_slot_name(name: str) -> bool:
        """Check that a name addresses a single entry directly under the root.

        Hidden names are reserved for temporary files and never count as slots.
        """
        if not isinstance(name, str) or not name:
            return False
        if name.startswith(".") or "\x00" in name:
            return False
        separators = {"/", "\\", os.sep}
        if os.altsep:
            separators.add(os.altsep)
        return not any(sep in name for sep in separators)

    def slot_path(self, video_id: str) -> Path:
        """Directory holding everything stored for an id"""
        if not self.is_valid_slot_name(video_id):
            raise ValueError(f"Invalid video id: {video_id!r}")
        return self.base_path / video_id

    def payload_path(self, video_id: str) -> Path:
        return self.slot_path(video_id) / self.storage_config.payload_filename

    def metadata_path(self, video_id: str) -> Path:
        return self.slot_path(video_id) / self.storage_config.metadata_filename

    # ------------------------------------------------------------------ #
    # Namespace primitives                                               #
    # ------------------------------------------------------------------ #
    async def create_slot(self, video_id: str) -> Path:
        """Create the slot directory, failing if the name is already taken.

        Raises FileExistsError on collision and OSError on other failures.
        """
        path = self.slot_path(video_id)
        await aiofiles.os.mkdir(path)
        await self.sync_directory(self.base_path)
        self.logger.debug(f"Created slot {video_id}")
        return path

    async def sync_directory(self, path: Path) -> None:
        """Flush entries created or renamed inside a directory to disk"""
        await asyncio.to_thread(_fsync_directory, path)

    async def slot_exists(self, video_id: str) -> bool:
        if not self.is_valid_slot_name(video_id):
            return False
        return await aiofiles.os.path.isdir(self.slot_path(video_id))

    async def list_slots(self) -> List[str]:
        """List slot names under the root. Raises OSError if the root cannot be read."""
        names = await aiofiles.os.listdir(self.base_path)
        slots = []
        for name in names:
            if not self.is_valid_slot_name(name):
                continue
            if await aiofiles.os.path.isdir(self.base_path / name):
                slots.append(name)
        return slots

    async def slot_state(self, video_id: str) -> SlotState:
        """Classify a slot by which of its two files are present"""
        has_metadata = await aiofiles.os.path.isfile(self.metadata_path(video_id))
        has_payload = await aiofiles.os.path.isfile(self.payload_path(video_id))
        return SlotState.classify(has_metadata, has_payload)

    # ------------------------------------------------------------------ #
    # Reporting                                                          #
    # ------------------------------------------------------------------ #
    def _scan_slots(self) -> List[Path]:
        return [entry for entry in sorted(self.base_path.iterdir()) if entry.is_dir() and self.is_valid_slot_name(entry.name)]

    def _classify_sync(self, slot: Path) -> SlotState:
        has_metadata = (slot / self.storage_config.metadata_filename).is_file()
        has_payload = (slot / self.storage_config.payload_filename).is_file()
        return SlotState.classify(has_metadata, has_payload)

    def get_storage_statistics(self) -> Dict[str, Any]:
        """Get storage usage statistics"""
        stats = {"base_path": str(self.base_path), "total_slots": 0, "total_videos": 0, "total_size_bytes": 0, "slot_states": {state.value: 0 for state in SlotState}, "disk_usage": {}}

        disk_usage = shutil.disk_usage(self.base_path)
        stats["disk_usage"] = {"total_bytes": disk_usage.total, "used_bytes": disk_usage.used, "free_bytes": disk_usage.free, "used_percent": (disk_usage.used / disk_usage.total) * 100 if disk_usage.total else 0.0}

        for slot in self._scan_slots():
            stats["total_slots"] += 1
            state = self._classify_sync(slot)
            stats["slot_states"][state.value] += 1
            if state.is_readable:
                stats["total_videos"] += 1

            payload = slot / self.storage_config.payload_filename
            try:
                if payload.is_file():
                    stats["total_size_bytes"] += payload.stat().st_size
            except OSError as e:
                self.logger.warning(f"Could not get size for {payload}: {e}")

        return stats

    def verify_storage_integrity(self) -> Dict[str, Any]:
        """Report slots whose metadata and payload are not both present.

        Nothing is repaired: an orphaned payload left by a failed metadata write
        stays on disk and is listed under ``payload_only``.
        """
        integrity_report = {"total_slots": 0, "complete": 0, "empty_slots": [], "payload_only": [], "metadata_only": [], "stale_part_files": []}

        for slot in self._scan_slots():
            integrity_report["total_slots"] += 1
            state = self._classify_sync(slot)
            if state is SlotState.COMPLETE:
                integrity_report["complete"] += 1
            elif state is SlotState.EMPTY:
                integrity_report["empty_slots"].append(slot.name)
            elif state is SlotState.PAYLOAD_ONLY:
                integrity_report["payload_only"].append(slot.name)
            else:
                integrity_report["metadata_only"].append(slot.name)

            for leftover in slot.glob(f".*{PART_SUFFIX}"):
                integrity_report["stale_part_files"].append(str(leftover.relative_to(self.base_path)))

        corrupt = len(integrity_report["payload_only"]) + len(integrity_report["metadata_only"])
        if corrupt:
            self.logger.warning(f"Storage integrity check found {corrupt} inconsistent slots")
        else:
            self.logger.info(f"Storage integrity check completed: {integrity_report['total_slots']} slots, none inconsistent")

        return integrity_report
