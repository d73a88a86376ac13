"""Tests for the event dispatcher."""

from datetime import datetime, timezone

import pytest

from fakes import FailingBlobStore, FakePlatform
from mediakeeper.bus.events import (
    AttachmentSet,
    Document,
    InboundEvent,
    Message,
    PhotoSize,
    Video,
)
from mediakeeper.media.keys import generate_message_key
from mediakeeper.pipeline.dispatcher import Dispatcher, OutcomeStatus
from mediakeeper.pipeline.filter import UpdateFilter
from mediakeeper.storage.dedup import DedupService
from mediakeeper.storage.memory import MemoryDedupStore

CHAT_ID = -1001234567890


def _event(message_id: int = 7, chat_id: int = CHAT_ID, **attachments) -> InboundEvent:
    return InboundEvent.channel_post(Message(
        id=message_id,
        chat_id=chat_id,
        attachments=AttachmentSet(**attachments),
    ))


def _dispatcher(platform, blob_store, dedup=None) -> Dispatcher:
    return Dispatcher(UpdateFilter(str(CHAT_ID)), platform, blob_store, dedup=dedup)


@pytest.mark.asyncio
async def test_single_video_end_to_end(blob_store):
    platform = FakePlatform({"vid": b"video-bytes"})
    dispatcher = _dispatcher(platform, blob_store)

    event = _event(video=Video("vid", file_name="clip.mov", mime_type="video/quicktime"))
    result = await dispatcher.process_event(event)

    assert platform.resolved == ["vid"]
    assert platform.fetched == ["path/vid"]
    assert len(blob_store.objects) == 1

    key, stored = next(iter(blob_store.objects.items()))
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    assert key.startswith(f"{today}/")
    assert key.endswith("_clip.mov")
    assert stored.data == b"video-bytes"
    assert stored.content_type == "video/quicktime"

    assert result.processed is True
    assert result.archived_keys == [key]
    assert dispatcher.dedup is None


@pytest.mark.asyncio
async def test_out_of_scope_has_no_side_effects(blob_store):
    platform = FakePlatform({"vid": b"x"})
    dispatcher = _dispatcher(platform, blob_store)

    result = await dispatcher.process_event(_event(chat_id=1, video=Video("vid")))

    assert result.processed is False
    assert result.skipped_reason == "out_of_scope"
    assert platform.resolved == []
    assert blob_store.objects == {}


@pytest.mark.asyncio
async def test_missing_event_is_dropped(blob_store):
    result = await _dispatcher(FakePlatform(), blob_store).process_event(None)
    assert result.processed is False


@pytest.mark.asyncio
async def test_unresolvable_file_does_not_stop_siblings(blob_store):
    platform = FakePlatform({"v": b"video"})
    dispatcher = _dispatcher(platform, blob_store)

    event = _event(photo=(PhotoSize("gone"),), video=Video("v", file_name="v.mp4"))
    result = await dispatcher.process_event(event)

    assert [o.status for o in result.outcomes] == [OutcomeStatus.FAILED, OutcomeStatus.ARCHIVED]
    assert "File path not available" in result.outcomes[0].error
    assert result.outcomes[0].key is None
    assert len(blob_store.objects) == 1


@pytest.mark.asyncio
async def test_download_failure_is_contained(blob_store):
    platform = FakePlatform({"p": b"photo", "v": b"video"}, broken={"p"})
    result = await _dispatcher(platform, blob_store).process_event(
        _event(photo=(PhotoSize("p"),), video=Video("v"))
    )
    assert [o.ok for o in result.outcomes] == [False, True]


@pytest.mark.asyncio
async def test_store_failure_is_contained():
    platform = FakePlatform({"p": b"photo", "v": b"video"})
    store = FailingBlobStore(reject={"image/jpeg"})
    result = await _dispatcher(platform, store).process_event(
        _event(photo=(PhotoSize("p"),), video=Video("v"))
    )

    assert [o.ok for o in result.outcomes] == [False, True]
    assert "AccessDenied" in result.outcomes[0].error
    assert len(store.inner.objects) == 1


@pytest.mark.asyncio
async def test_invalid_file_name_is_recorded_not_raised(blob_store):
    # Documents without a name fall back to an extensionless name
    platform = FakePlatform({"d": b"img", "v": b"video"})
    result = await _dispatcher(platform, blob_store).process_event(
        _event(video=Video("v"), document=Document("d", mime_type="image/png"))
    )

    assert [o.ok for o in result.outcomes] == [True, False]
    assert result.outcomes[1].error == "File must have an extension"


@pytest.mark.asyncio
async def test_unexpected_error_is_contained(blob_store):
    class ExplodingPlatform(FakePlatform):
        async def fetch_bytes(self, handle):
            raise RuntimeError("boom")

    result = await _dispatcher(ExplodingPlatform({"v": b""}), blob_store).process_event(
        _event(video=Video("v"))
    )
    assert result.outcomes[0].status == OutcomeStatus.FAILED
    assert result.outcomes[0].error == "boom"


@pytest.mark.asyncio
async def test_no_media_is_processed_with_no_outcomes(blob_store):
    result = await _dispatcher(FakePlatform(), blob_store).process_event(_event())
    assert result.processed is True
    assert result.outcomes == []


class TestDedup:
    @pytest.mark.asyncio
    async def test_marks_after_archiving(self, blob_store):
        store = MemoryDedupStore()
        dispatcher = _dispatcher(FakePlatform({"v": b"x"}), blob_store, DedupService(store))

        await dispatcher.process_event(_event(message_id=0, video=Video("v")))

        assert await store.get(generate_message_key(0)) is not None

    @pytest.mark.asyncio
    async def test_skips_already_archived_message(self, blob_store):
        store = MemoryDedupStore()
        await store.set(generate_message_key(7), "done")
        platform = FakePlatform({"v": b"x"})
        dispatcher = _dispatcher(platform, blob_store, DedupService(store))

        result = await dispatcher.process_event(_event(message_id=7, video=Video("v")))

        assert result.processed is False
        assert result.skipped_reason == "duplicate"
        assert platform.resolved == []
        assert blob_store.objects == {}

    @pytest.mark.asyncio
    async def test_not_marked_when_everything_failed(self, blob_store):
        store = MemoryDedupStore()
        dispatcher = _dispatcher(FakePlatform(), blob_store, DedupService(store))

        await dispatcher.process_event(_event(video=Video("missing")))

        assert await store.get(generate_message_key(7)) is None
