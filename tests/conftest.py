"""
Shared fixtures for the lutube test suite.

Every test gets its own storage root under pytest's tmp_path.
"""

import hashlib
import io
import json
import os
import stat

import pytest

from lutube.core.config import Config
from lutube.storage.manager import StorageManager
from lutube.video.application.video_service import VideoService
from lutube.video.infrastructure.allocators import FileSystemIdentifierAllocator
from lutube.video.infrastructure.repositories import FileSystemVideoRepository


class BytesSource:
    """In-memory async payload source that records whether it was closed"""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)
        self.closed = False
        self.reads = 0

    async def read(self, size: int = -1) -> bytes:
        self.reads += 1
        return self._buffer.read(size)

    async def close(self):
        self.closed = True


class GeneratedSource:
    """Produces ``total_size`` deterministic bytes without holding them in memory"""

    def __init__(self, total_size: int, seed: bytes = b"lutube"):
        self.remaining = total_size
        self.seed = seed
        self.counter = 0
        self.digest = hashlib.sha256()
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        if self.remaining <= 0:
            return b""
        if size < 0:
            size = self.remaining
        block = hashlib.sha256(self.seed + self.counter.to_bytes(8, "big")).digest()
        self.counter += 1
        chunk = (block * (size // len(block) + 1))[: min(size, self.remaining)]
        self.remaining -= len(chunk)
        self.digest.update(chunk)
        return chunk

    def close(self):
        self.closed = True


class FailingSource:
    """Yields some bytes, then raises as if the client connection dropped"""

    def __init__(self, good_bytes: bytes, error: Exception = None):
        self._buffer = io.BytesIO(good_bytes)
        self.error = error or ConnectionResetError("client disconnected")
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        chunk = self._buffer.read(size)
        if chunk:
            return chunk
        raise self.error

    async def close(self):
        self.closed = True


def write_config(tmp_path, **storage_overrides) -> str:
    config_path = tmp_path / "config.json"
    storage = {"base_path": str(tmp_path / "videos")}
    storage.update(storage_overrides)
    config_path.write_text(json.dumps({"storage": storage, "system": {"log_file": None}}), encoding="utf-8")
    return str(config_path)


@pytest.fixture
def config(tmp_path):
    return Config(write_config(tmp_path, chunk_size_bytes=4096))


@pytest.fixture
def storage_manager(config):
    return StorageManager(config)


@pytest.fixture
def allocator(storage_manager):
    return FileSystemIdentifierAllocator(storage_manager)


@pytest.fixture
def repository(storage_manager):
    return FileSystemVideoRepository(storage_manager)


@pytest.fixture
def video_service(allocator, repository):
    return VideoService(identifier_allocator=allocator, video_repository=repository)


@pytest.fixture
def bytes_source():
    return BytesSource


@pytest.fixture
def generated_source():
    return GeneratedSource


@pytest.fixture
def failing_source():
    return FailingSource


@pytest.fixture
def fsync_kinds(monkeypatch):
    """Record whether each fsync hit a regular file or a directory"""
    kinds = []
    real_fsync = os.fsync

    def recording_fsync(fd):
        kinds.append("dir" if stat.S_ISDIR(os.fstat(fd).st_mode) else "file")
        real_fsync(fd)

    monkeypatch.setattr(os, "fsync", recording_fsync)
    return kinds
