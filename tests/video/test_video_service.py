"""
Tests for the video application service.
"""

import logging

import pytest

from lutube.video.application.video_service import VideoService
from lutube.video.domain.exceptions import AllocationFailedError, VideoNotFoundError, WriteFailedError
from lutube.video.domain.interfaces import IdentifierAllocator
from lutube.video.domain.models import SlotState, Video


class BrokenAllocator(IdentifierAllocator):
    async def allocate(self) -> str:
        raise AllocationFailedError("disk full")


@pytest.mark.asyncio
async def test_publish_scenario(video_service, bytes_source):
    payload = b"\x00\x00\x00\x20ftypisom" * 1000

    video = await video_service.publish_video("My Trip", bytes_source(payload))

    assert video.title == "My Trip"
    assert await video_service.get_video(video.id) == video
    assert video in await video_service.list_videos()
    assert (await video_service.get_payload_path(video.id)).read_bytes() == payload
    assert await video_service.get_slot_state(video.id) is SlotState.COMPLETE


@pytest.mark.asyncio
async def test_get_missing_video(video_service):
    with pytest.raises(VideoNotFoundError):
        await video_service.get_video("nonexistent")


@pytest.mark.asyncio
async def test_allocation_failure_closes_source(repository, bytes_source):
    service = VideoService(identifier_allocator=BrokenAllocator(), video_repository=repository)
    source = bytes_source(b"data")

    with pytest.raises(AllocationFailedError):
        await service.publish_video("title", source)

    assert source.closed is True


@pytest.mark.asyncio
async def test_failed_publish_leaves_only_empty_slot(video_service, storage_manager, failing_source):
    with pytest.raises(WriteFailedError):
        await video_service.publish_video("doomed", failing_source(b"abc"))

    assert await video_service.list_videos() == []
    assert len(storage_manager.verify_storage_integrity()["empty_slots"]) == 1


@pytest.mark.asyncio
async def test_payload_without_metadata_not_served(allocator, video_service, storage_manager):
    video_id = await allocator.allocate()
    storage_manager.payload_path(video_id).write_bytes(b"uncommitted")

    with pytest.raises(VideoNotFoundError):
        await video_service.get_payload_path(video_id)


@pytest.mark.asyncio
async def test_list_videos_many(video_service, bytes_source):
    published = [await video_service.publish_video(f"clip {i}", bytes_source(bytes([i]) * 100)) for i in range(5)]

    catalog = await video_service.list_videos()

    assert sorted(catalog, key=lambda v: v.id) == sorted(published, key=lambda v: v.id)
    assert all(isinstance(video, Video) for video in catalog)


@pytest.mark.asyncio
async def test_failed_publish_is_timed(video_service, failing_source, caplog):
    with caplog.at_level(logging.INFO, logger="performance.upload"):
        with pytest.raises(WriteFailedError):
            await video_service.publish_video("doomed", failing_source(b"abc"))

    failures = [r for r in caplog.records if r.name == "performance.upload" and r.getMessage().startswith("Failed: save ")]
    assert len(failures) == 1
    assert failures[0].levelno == logging.WARNING
