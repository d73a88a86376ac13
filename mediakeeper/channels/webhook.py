"""Webhook front door: receives pushed Telegram updates over HTTP."""

import asyncio
import hmac
import json
from datetime import datetime, timezone

from aiohttp import web
from loguru import logger
from telegram import Bot, Update

from mediakeeper.channels.telegram import event_from_update
from mediakeeper.config.schema import WebhookConfig
from mediakeeper.pipeline.dispatcher import Dispatcher

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@web.middleware
async def error_middleware(request: web.Request, handler):
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error handling {request.method} {request.path}: {e}")
        return web.json_response(
            {"error": "Internal Server Error", "message": str(e), "timestamp": _now_iso()},
            status=500,
        )


class WebhookServer:
    """HTTP server that validates the shared secret and hands updates to the dispatcher.

    Telegram gets a success acknowledgment once the update has been
    dispatched, whatever happened to individual attachments.
    """

    def __init__(
        self,
        config: WebhookConfig,
        dispatcher: Dispatcher,
        bot: Bot | None = None,
        secret_token: str = "",
    ):
        self.config = config
        self.dispatcher = dispatcher
        self.bot = bot
        self.secret_token = secret_token
        self._runner: web.AppRunner | None = None

    def make_app(self) -> web.Application:
        app = web.Application(middlewares=[error_middleware])
        app.router.add_get("/health", self._handle_health)
        app.router.add_post(self.config.path, self._handle_update)
        return app

    async def _handle_health(self, _request: web.Request) -> web.Response:
        return web.json_response({"status": "healthy", "timestamp": _now_iso()})

    async def _handle_update(self, request: web.Request) -> web.Response:
        if not self._secret_matches(request.headers.get(SECRET_HEADER, "")):
            logger.warning(f"Rejected webhook call from {request.remote}: bad secret")
            return web.json_response({"error": "Unauthorized"}, status=401)

        try:
            data = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return web.json_response({"error": "Invalid JSON"}, status=400)
        if not isinstance(data, dict):
            return web.json_response({"error": "Invalid update"}, status=400)

        try:
            update = Update.de_json(data, self.bot)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed update payload: {e}")
            return web.json_response({"error": "Invalid update"}, status=400)

        result = await self.dispatcher.process_event(event_from_update(update))
        logger.debug(
            f"Update {update.update_id} handled: processed={result.processed}, "
            f"archived={len(result.archived_keys)}"
        )
        return web.json_response({"ok": True})

    def _secret_matches(self, received: str) -> bool:
        # An unset secret rejects everything
        if not self.secret_token:
            return False
        return hmac.compare_digest(received.encode(), self.secret_token.encode())

    async def start(self) -> None:
        self._runner = web.AppRunner(self.make_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await site.start()
        logger.info(
            f"Webhook listening on http://{self.config.host}:{self.config.port}{self.config.path}"
        )

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Webhook server stopped")

    async def serve_forever(self) -> None:
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
