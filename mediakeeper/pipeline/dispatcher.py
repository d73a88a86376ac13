"""Dispatcher: archive every media file of an in-scope event."""

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from mediakeeper.bus.events import InboundEvent, MediaDescriptor
from mediakeeper.channels.base import MessagingPlatform, PlatformError
from mediakeeper.media.extractor import extract_media_files
from mediakeeper.media.keys import InvalidKeyInput, generate_archive_key
from mediakeeper.pipeline.filter import UpdateFilter
from mediakeeper.storage.base import BlobStore, StoreError
from mediakeeper.storage.dedup import DedupService


class OutcomeStatus(Enum):
    ARCHIVED = "archived"
    FAILED = "failed"


@dataclass
class AttachmentOutcome:
    """Result of archiving one media file."""

    descriptor: MediaDescriptor
    status: OutcomeStatus
    key: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.ARCHIVED


@dataclass
class EventResult:
    """Result of one process_event call."""

    processed: bool
    skipped_reason: str | None = None  # "out_of_scope" | "duplicate"
    outcomes: list[AttachmentOutcome] = field(default_factory=list)

    @property
    def archived_keys(self) -> list[str]:
        return [o.key for o in self.outcomes if o.ok and o.key]

    @property
    def failures(self) -> list[AttachmentOutcome]:
        return [o for o in self.outcomes if not o.ok]


class Dispatcher:
    """
    Orchestrates filter → extract → download → key → upload for one event.

    Attachments are handled sequentially; a failure on one never stops the
    others. Nothing is retried. Dedup markers are only read and written when
    a DedupService is passed in.
    """

    def __init__(
        self,
        update_filter: UpdateFilter,
        platform: MessagingPlatform,
        blob_store: BlobStore,
        dedup: DedupService | None = None,
    ):
        self.update_filter = update_filter
        self.platform = platform
        self.blob_store = blob_store
        self.dedup = dedup

    async def process_event(self, event: InboundEvent | None) -> EventResult:
        if not self.update_filter.should_process(event):
            logger.debug("Skipping out-of-scope update")
            return EventResult(processed=False, skipped_reason="out_of_scope")

        message = event.message

        if self.dedup and await self.dedup.is_message_processed(message.id):
            logger.info(f"Message {message.id} already archived, skipping")
            return EventResult(processed=False, skipped_reason="duplicate")

        outcomes = []
        for media_file in extract_media_files(message):
            outcomes.append(await self._archive(media_file))

        result = EventResult(processed=True, outcomes=outcomes)

        if self.dedup and result.archived_keys:
            await self.dedup.mark_message_processed(message.id, result.archived_keys)

        if result.failures:
            logger.warning(
                f"Message {message.id}: {len(result.failures)} of {len(outcomes)} "
                f"media file(s) failed"
            )
        return result

    async def _archive(self, media_file: MediaDescriptor) -> AttachmentOutcome:
        logger.info(f"Processing {media_file.kind.value}: {media_file.file_name}")
        try:
            handle = await self.platform.resolve_download_handle(media_file.source_ref)
            data = await self.platform.fetch_bytes(handle)

            key = generate_archive_key(media_file.file_name)

            await self.blob_store.put(key, data, media_file.mime_type)
        except (PlatformError, StoreError, InvalidKeyInput) as e:
            logger.error(f"Failed to process {media_file.file_name}: {e}")
            return AttachmentOutcome(media_file, OutcomeStatus.FAILED, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error processing {media_file.file_name}: {e}")
            return AttachmentOutcome(media_file, OutcomeStatus.FAILED, error=str(e))

        return AttachmentOutcome(media_file, OutcomeStatus.ARCHIVED, key=key)
