"""Scope filter for inbound events."""

from dataclasses import dataclass

from mediakeeper.bus.events import InboundEvent
from mediakeeper.config.schema import TelegramConfig


@dataclass(frozen=True)
class UpdateFilter:
    """Accepts events from one chat and, optionally, one forum topic.

    An unconfigured filter (no chat id) accepts nothing.
    """

    required_chat_id: str = ""
    required_thread_id: str | None = None

    @classmethod
    def from_config(cls, config: TelegramConfig) -> "UpdateFilter":
        return cls(
            required_chat_id=config.channel_id,
            required_thread_id=config.message_thread_id or None,
        )

    def should_process(self, event: InboundEvent | None) -> bool:
        if event is None:
            return False

        message = event.message

        if not self.required_chat_id:
            return False

        if str(message.chat_id) != self.required_chat_id:
            return False

        if self.required_thread_id:
            if message.thread_id is None or str(message.thread_id) != self.required_thread_id:
                return False

        return True
