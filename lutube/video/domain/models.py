"""
Video Domain Models.

Pure business entities and value objects for video operations.
These models contain no external dependencies and represent core business concepts.
"""

from dataclasses import dataclass
from enum import Enum


class SlotState(Enum):
    """What a storage slot currently holds"""
    COMPLETE = "complete"  # metadata and payload
    EMPTY = "empty"  # allocated, never saved
    PAYLOAD_ONLY = "payload_only"  # interrupted save or orphaned payload
    METADATA_ONLY = "metadata_only"  # payload missing

    @property
    def is_readable(self) -> bool:
        """Whether the slot has a metadata record a load can return"""
        return self in (SlotState.COMPLETE, SlotState.METADATA_ONLY)

    @property
    def is_corrupt(self) -> bool:
        """Metadata and payload disagree about whether the video exists"""
        return self in (SlotState.PAYLOAD_ONLY, SlotState.METADATA_ONLY)

    @classmethod
    def classify(cls, has_metadata: bool, has_payload: bool) -> 'SlotState':
        if has_metadata and has_payload:
            return cls.COMPLETE
        if has_metadata:
            return cls.METADATA_ONLY
        if has_payload:
            return cls.PAYLOAD_ONLY
        return cls.EMPTY


@dataclass(frozen=True)
class Video:
    """Video entity: an id and the title stored under it"""
    id: str
    title: str

    def __post_init__(self):
        if not self.id:
            raise ValueError("Video ID cannot be empty")
