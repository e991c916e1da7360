"""
Tests for identifier allocation.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from lutube.video.domain.exceptions import AllocationFailedError, VideoNotFoundError
from lutube.video.infrastructure.allocators import FileSystemIdentifierAllocator


@pytest.mark.asyncio
async def test_allocate_creates_empty_slot(allocator, storage_manager):
    video_id = await allocator.allocate()

    slot = storage_manager.slot_path(video_id)
    assert slot.is_dir()
    assert list(slot.iterdir()) == []


@pytest.mark.asyncio
async def test_concurrent_allocations_are_distinct(allocator, storage_manager):
    ids = await asyncio.gather(*(allocator.allocate() for _ in range(200)))

    assert len(set(ids)) == 200
    assert sorted(await storage_manager.list_slots()) == sorted(ids)


def test_allocations_from_separate_event_loops_are_distinct(allocator):
    def allocate_batch():
        return asyncio.run(_allocate_many(allocator, 25))

    with ThreadPoolExecutor(max_workers=4) as pool:
        batches = list(pool.map(lambda _: allocate_batch(), range(4)))

    ids = [video_id for batch in batches for video_id in batch]
    assert len(ids) == 100
    assert len(set(ids)) == 100


async def _allocate_many(allocator, count):
    return [await allocator.allocate() for _ in range(count)]


@pytest.mark.asyncio
async def test_collision_draws_a_new_name(storage_manager):
    await storage_manager.create_slot("taken")
    names = iter(["taken", "taken", "fresh"])
    allocator = FileSystemIdentifierAllocator(storage_manager, name_factory=lambda: next(names))

    assert await allocator.allocate() == "fresh"


@pytest.mark.asyncio
async def test_exhausted_namespace_fails(storage_manager):
    await storage_manager.create_slot("taken")
    allocator = FileSystemIdentifierAllocator(storage_manager, name_factory=lambda: "taken")

    with pytest.raises(AllocationFailedError):
        await allocator.allocate()


@pytest.mark.asyncio
async def test_missing_root_fails_allocation(storage_manager):
    storage_manager.base_path.rmdir()
    allocator = FileSystemIdentifierAllocator(storage_manager)

    with pytest.raises(AllocationFailedError):
        await allocator.allocate()


@pytest.mark.asyncio
async def test_unusable_generated_name_fails(storage_manager):
    allocator = FileSystemIdentifierAllocator(storage_manager, name_factory=lambda: "../outside")

    with pytest.raises(AllocationFailedError):
        await allocator.allocate()


@pytest.mark.asyncio
async def test_unsaved_allocation_is_not_found(allocator, repository):
    video_id = await allocator.allocate()

    with pytest.raises(VideoNotFoundError):
        await repository.load(video_id)



@pytest.mark.asyncio
async def test_allocation_flushes_storage_root(allocator, fsync_kinds):
    await allocator.allocate()

    assert fsync_kinds == ["dir"]
