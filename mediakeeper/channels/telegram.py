"""Telegram platform client using python-telegram-bot."""

import telegram
from loguru import logger
from telegram import Bot, Update
from telegram.error import BadRequest, TelegramError
from telegram.request import HTTPXRequest

from mediakeeper.bus.events import (
    AttachmentSet,
    Document,
    InboundEvent,
    Message,
    PhotoSize,
    Video,
)
from mediakeeper.channels.base import (
    FileNotAvailableError,
    MessagingPlatform,
    PlatformTransportError,
)

ALLOWED_UPDATES = ["message", "channel_post"]


def _convert_message(message: telegram.Message) -> Message:
    photo = tuple(
        PhotoSize(file_id=p.file_id, file_size=p.file_size)
        for p in (message.photo or ())
    )

    video = None
    if message.video:
        v = message.video
        video = Video(
            file_id=v.file_id,
            file_name=v.file_name,
            mime_type=v.mime_type,
            file_size=v.file_size,
        )

    document = None
    if message.document:
        d = message.document
        document = Document(
            file_id=d.file_id,
            file_name=d.file_name,
            mime_type=d.mime_type,
            file_size=d.file_size,
        )

    return Message(
        id=message.message_id,
        chat_id=message.chat.id,
        thread_id=message.message_thread_id,
        attachments=AttachmentSet(photo=photo, video=video, document=document),
        group_id=message.media_group_id,
    )


def event_from_update(update: Update) -> InboundEvent | None:
    """Convert a Telegram update into an InboundEvent.

    Returns None for updates that carry neither a message nor a channel post.
    """
    if update.message is not None:
        return InboundEvent.message_event(_convert_message(update.message), update.update_id)
    if update.channel_post is not None:
        return InboundEvent.channel_post(_convert_message(update.channel_post), update.update_id)
    return None


def create_bot(token: str, proxy: str | None = None) -> Bot:
    """Build a Bot, optionally routing requests through an HTTP/SOCKS5 proxy."""
    if proxy:
        return Bot(token, request=HTTPXRequest(proxy=proxy))
    return Bot(token)


class TelegramPlatform(MessagingPlatform):
    """Downloads files and manages the webhook subscription."""

    name = "telegram"

    def __init__(self, bot: Bot):
        self.bot = bot

    async def resolve_download_handle(self, file_ref: str) -> telegram.File:
        try:
            file = await self.bot.get_file(file_ref)
        except BadRequest as e:
            raise FileNotAvailableError(f"Failed to get file info for {file_ref}: {e}") from e
        except TelegramError as e:
            raise PlatformTransportError(f"Failed to get file info for {file_ref}: {e}") from e

        if not file.file_path:
            raise FileNotAvailableError("File path not available")
        return file

    async def fetch_bytes(self, handle: telegram.File) -> bytes:
        try:
            data = await handle.download_as_bytearray()
        except TelegramError as e:
            raise PlatformTransportError(f"Failed to download file: {e}") from e
        return bytes(data)

    async def set_webhook(self, url: str, secret_token: str | None = None) -> bool:
        """Register the push subscription for message and channel_post updates."""
        try:
            ok = await self.bot.set_webhook(
                url=url,
                allowed_updates=ALLOWED_UPDATES,
                secret_token=secret_token or None,
            )
        except TelegramError as e:
            raise PlatformTransportError(f"Failed to set webhook: {e}") from e
        logger.info(f"Webhook set to {url}")
        return ok

    async def delete_webhook(self) -> bool:
        try:
            ok = await self.bot.delete_webhook()
        except TelegramError as e:
            raise PlatformTransportError(f"Failed to delete webhook: {e}") from e
        logger.info("Webhook deleted")
        return ok

    async def get_updates(self, offset: int, limit: int) -> tuple[Update, ...]:
        """Long-poll for pending updates (development substitute for the webhook)."""
        try:
            return await self.bot.get_updates(
                offset=offset,
                limit=limit,
                allowed_updates=ALLOWED_UPDATES,
            )
        except TelegramError as e:
            raise PlatformTransportError(f"Telegram API error: Unable to get updates: {e}") from e
