"""Long-poll loop for local development where no webhook is reachable."""

import asyncio

from loguru import logger

from mediakeeper.channels.telegram import TelegramPlatform, event_from_update
from mediakeeper.config.schema import PollConfig
from mediakeeper.pipeline.dispatcher import Dispatcher


class UpdatePoller:
    """Fetches pending updates every ``interval_s`` and dispatches them in order."""

    def __init__(self, platform: TelegramPlatform, dispatcher: Dispatcher, config: PollConfig):
        self.platform = platform
        self.dispatcher = dispatcher
        self.config = config
        self.offset = 0
        self._running = False

    async def poll_once(self) -> int:
        """Run one getUpdates round. Returns the number of updates received."""
        updates = await self.platform.get_updates(offset=self.offset, limit=self.config.limit)
        if not updates:
            logger.debug("No new updates")
            return 0

        logger.info(f"Received {len(updates)} update(s)")

        for update in updates:
            try:
                await self.dispatcher.process_event(event_from_update(update))
            except Exception as e:
                logger.exception(f"Failed to process update {update.update_id}: {e}")

        self.offset = max(u.update_id for u in updates) + 1
        logger.debug(f"Next offset: {self.offset}")
        return len(updates)

    async def run(self) -> None:
        self._running = True
        logger.info(f"Polling every {self.config.interval_s}s")

        while self._running:
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Error during polling: {e}")
            await asyncio.sleep(self.config.interval_s)

    def stop(self) -> None:
        self._running = False
        logger.info("Stopping poller...")
