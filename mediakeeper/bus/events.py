"""Event types for the ingestion pipeline."""

from dataclasses import dataclass, field
from enum import Enum


class EventKind(Enum):
    """Which update field carried the message."""

    MESSAGE = "message"  # Private chats, groups, supergroups
    CHANNEL_POST = "channel_post"  # Channels where the bot is an admin


class MediaKind(Enum):
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"


@dataclass(frozen=True)
class PhotoSize:
    """One resolution of a photo."""

    file_id: str
    file_size: int | None = None


@dataclass(frozen=True)
class Video:
    file_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


@dataclass(frozen=True)
class Document:
    file_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


@dataclass(frozen=True)
class AttachmentSet:
    """At most one primary media reference per channel."""

    photo: tuple[PhotoSize, ...] = ()  # Ascending resolution
    video: Video | None = None
    document: Document | None = None


@dataclass(frozen=True)
class Message:
    """A message posted to a monitored chat."""

    id: int
    chat_id: int
    thread_id: int | None = None  # Forum topic in a group chat
    attachments: AttachmentSet = field(default_factory=AttachmentSet)
    group_id: str | None = None  # Album identifier


@dataclass(frozen=True)
class InboundEvent:
    """An update carrying exactly one message.

    Build through :meth:`message_event` or :meth:`channel_post` so that the
    kind always matches the update field it came from.
    """

    kind: EventKind
    message: Message
    update_id: int | None = None

    @classmethod
    def message_event(cls, message: Message, update_id: int | None = None) -> "InboundEvent":
        return cls(EventKind.MESSAGE, message, update_id)

    @classmethod
    def channel_post(cls, message: Message, update_id: int | None = None) -> "InboundEvent":
        return cls(EventKind.CHANNEL_POST, message, update_id)


@dataclass(frozen=True)
class MediaDescriptor:
    """A normalized media file extracted from a message.

    Lives for one processing pass; never persisted.
    """

    source_ref: str  # Platform file identifier
    file_name: str
    mime_type: str
    kind: MediaKind
    size_bytes: int | None = None
