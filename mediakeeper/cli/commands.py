"""CLI commands for mediakeeper."""

import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from mediakeeper import __logo__, __version__

app = typer.Typer(
    name="mediakeeper",
    help=f"{__logo__} mediakeeper - Archive Telegram media to object storage",
    no_args_is_help=True,
)

console = Console()


def _setup_logging(level: str, verbose: bool = False) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else level.upper())


def _validate(config, creds) -> str | None:
    """Validate settings needed to run the pipeline.

    Returns error message string or None if OK.
    """
    if not creds.telegram.bot_token:
        return "No bot token configured. Set it in ~/.mediakeeper/credentials.json"
    if not config.storage.bucket_name:
        return "No storage bucket configured (storage.bucketName)"
    if not config.telegram.channel_id:
        return "No channel configured (telegram.channelId); nothing would be archived"
    return None


def _build_dedup(config):
    """Create the DedupService and the store behind it, or (None, None) if disabled."""
    from mediakeeper.storage.dedup import DedupService

    if not config.dedup.enabled:
        return None, None

    if config.dedup.redis_url:
        from mediakeeper.storage.redis_store import RedisDedupStore
        store = RedisDedupStore.from_url(config.dedup.redis_url)
    else:
        from mediakeeper.storage.memory import MemoryDedupStore
        logger.warning("Dedup enabled without redis_url; markers are kept in memory only")
        store = MemoryDedupStore()

    return DedupService(store, ttl_seconds=config.dedup.ttl_seconds), store


def _build_pipeline(config, creds):
    """Wire the bot, platform client, stores and dispatcher.

    Returns (bot, platform, dispatcher, dedup_store).
    """
    from mediakeeper.channels.telegram import TelegramPlatform, create_bot
    from mediakeeper.pipeline.dispatcher import Dispatcher
    from mediakeeper.pipeline.filter import UpdateFilter
    from mediakeeper.storage.s3 import S3BlobStore, resolve_endpoint_url

    bot = create_bot(creds.telegram.bot_token, proxy=config.telegram.proxy)
    platform = TelegramPlatform(bot)

    blob_store = S3BlobStore(
        bucket_name=config.storage.bucket_name,
        endpoint_url=resolve_endpoint_url(config.storage.endpoint_url, config.storage.account_id),
        access_key_id=creds.storage.access_key_id,
        secret_access_key=creds.storage.secret_access_key,
        region=config.storage.region,
    )

    dedup, dedup_store = _build_dedup(config)

    dispatcher = Dispatcher(
        update_filter=UpdateFilter.from_config(config.telegram),
        platform=platform,
        blob_store=blob_store,
        dedup=dedup,
    )
    return bot, platform, dispatcher, dedup_store


def _load_or_exit():
    from mediakeeper.auth.credentials import load_credentials
    from mediakeeper.config.loader import load_config

    config = load_config()
    creds = load_credentials()

    error = _validate(config, creds)
    if error:
        console.print(f"[red]Error: {error}[/red]")
        raise typer.Exit(1)
    return config, creds


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} mediakeeper v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """mediakeeper - Archive Telegram media to object storage."""
    pass


# ============================================================================
# Serve / Poll
# ============================================================================


@app.command()
def serve(
    port: int = typer.Option(None, "--port", "-p", help="Override webhook port"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
):
    """Run the webhook server."""
    from mediakeeper.channels.webhook import WebhookServer

    config, creds = _load_or_exit()
    _setup_logging(config.logging.level, verbose)

    if port:
        config.webhook.port = port

    if not creds.telegram.webhook_secret:
        console.print("[red]Error: No webhook secret configured; every request would be rejected[/red]")
        raise typer.Exit(1)

    bot, _, dispatcher, dedup_store = _build_pipeline(config, creds)
    server = WebhookServer(
        config.webhook,
        dispatcher,
        bot=bot,
        secret_token=creds.telegram.webhook_secret,
    )

    console.print(f"{__logo__} Serving webhook on port {config.webhook.port}...")

    async def run():
        async with bot:
            try:
                await server.serve_forever()
            finally:
                if dedup_store is not None:
                    await dedup_store.close()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        console.print("\nShutting down...")


@app.command()
def poll(
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
):
    """Poll Telegram for updates (local development, no webhook needed)."""
    from mediakeeper.channels.poller import UpdatePoller

    config, creds = _load_or_exit()
    _setup_logging(config.logging.level, verbose)

    bot, platform, dispatcher, dedup_store = _build_pipeline(config, creds)
    poller = UpdatePoller(platform, dispatcher, config.poll)

    console.print(f"{__logo__} Polling every {config.poll.interval_s}s. Press Ctrl+C to stop.")

    async def run():
        async with bot:
            # getUpdates is refused while a webhook is registered
            await platform.delete_webhook()
            try:
                await poller.run()
            finally:
                if dedup_store is not None:
                    await dedup_store.close()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        poller.stop()
        console.print("\nStopped.")


# ============================================================================
# Webhook Commands
# ============================================================================

webhook_app = typer.Typer(help="Manage the Telegram webhook subscription")
app.add_typer(webhook_app, name="webhook")


@webhook_app.command("set")
def webhook_set(
    url: str = typer.Argument(None, help="Public webhook URL (defaults to config)"),
):
    """Register the webhook with Telegram."""
    from mediakeeper.auth.credentials import load_credentials
    from mediakeeper.channels.base import PlatformError
    from mediakeeper.channels.telegram import TelegramPlatform, create_bot
    from mediakeeper.config.loader import load_config

    config = load_config()
    creds = load_credentials()

    target = url or config.webhook_url
    if not target:
        console.print("[red]Error: No URL given and webhook.publicUrl not configured[/red]")
        raise typer.Exit(1)
    if not creds.telegram.bot_token:
        console.print("[red]Error: No bot token configured[/red]")
        raise typer.Exit(1)

    bot = create_bot(creds.telegram.bot_token, proxy=config.telegram.proxy)

    async def run():
        async with bot:
            return await TelegramPlatform(bot).set_webhook(target, creds.telegram.webhook_secret)

    try:
        asyncio.run(run())
    except PlatformError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Webhook set: {target}")


@webhook_app.command("delete")
def webhook_delete():
    """Remove the webhook subscription."""
    from mediakeeper.auth.credentials import load_credentials
    from mediakeeper.channels.base import PlatformError
    from mediakeeper.channels.telegram import TelegramPlatform, create_bot
    from mediakeeper.config.loader import load_config

    config = load_config()
    creds = load_credentials()
    if not creds.telegram.bot_token:
        console.print("[red]Error: No bot token configured[/red]")
        raise typer.Exit(1)

    bot = create_bot(creds.telegram.bot_token, proxy=config.telegram.proxy)

    async def run():
        async with bot:
            return await TelegramPlatform(bot).delete_webhook()

    try:
        asyncio.run(run())
    except PlatformError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓[/green] Webhook deleted")


# ============================================================================
# Status Commands
# ============================================================================


@app.command()
def status():
    """Show mediakeeper configuration status."""
    from mediakeeper.auth.credentials import get_credentials_path, load_credentials
    from mediakeeper.config.loader import get_config_path, load_config

    config_path = get_config_path()
    creds_path = get_credentials_path()
    config = load_config()
    creds = load_credentials()

    console.print(f"{__logo__} mediakeeper Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")
    console.print(
        f"Credentials: {creds_path} {'[green]✓[/green]' if creds_path.exists() else '[red]✗[/red]'}"
    )

    def _show(value) -> str:
        return str(value) if value else "[dim]not set[/dim]"

    token = creds.telegram.bot_token
    table = Table(title="Pipeline")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="yellow")
    table.add_row("Bot token", f"{token[:10]}..." if token else "[dim]not set[/dim]")
    table.add_row("Channel", _show(config.telegram.channel_id))
    table.add_row("Thread", _show(config.telegram.message_thread_id))
    table.add_row("Bucket", _show(config.storage.bucket_name))
    table.add_row("Webhook URL", _show(config.webhook_url))
    table.add_row("Webhook secret", "set" if creds.telegram.webhook_secret else "[dim]not set[/dim]")
    table.add_row(
        "Dedup",
        f"{'redis' if config.dedup.redis_url else 'memory'}, ttl {config.dedup.ttl_seconds}s"
        if config.dedup.enabled else "[dim]disabled[/dim]",
    )
    console.print(table)


if __name__ == "__main__":
    app()
