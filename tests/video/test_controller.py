"""
Tests for the video controller's payload streaming.
"""

import pytest

from lutube.video.presentation.controllers import VideoController


async def _read_body(response):
    return b"".join([chunk async for chunk in response.body_iterator])


@pytest.mark.asyncio
async def test_stream_survives_resave(video_service, repository, bytes_source):
    original = b"first version " * 10000
    video = await video_service.publish_video("clip", bytes_source(original))
    controller = VideoController(video_service)

    response = await controller.stream_video(video.id)
    await repository.save(video.id, "clip v2", bytes_source(b"short"))
    body = await _read_body(response)

    assert body == original
    assert response.headers["content-length"] == str(len(original))


@pytest.mark.asyncio
async def test_stream_sends_whole_payload(video_service, bytes_source):
    payload = bytes(range(256)) * 1000
    video = await video_service.publish_video("clip", bytes_source(payload))

    response = await VideoController(video_service).stream_video(video.id)

    assert response.media_type == "video/mp4"
    assert await _read_body(response) == payload
