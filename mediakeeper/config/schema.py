"""Configuration schema using Pydantic."""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class TelegramConfig(BaseModel):
    """Monitored chat configuration."""
    channel_id: str = ""  # Chat to archive; empty means nothing is archived
    message_thread_id: str | None = None  # Forum topic to restrict to
    proxy: str | None = None  # HTTP/SOCKS5 proxy URL, e.g. "socks5://127.0.0.1:1080"

    @field_validator("channel_id", "message_thread_id", mode="before")
    @classmethod
    def ids_as_strings(cls, v):
        # Telegram ids are numeric in the Bot API and in hand-written config
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class StorageConfig(BaseModel):
    """S3-compatible object storage configuration."""
    bucket_name: str = ""
    account_id: str = ""  # Cloudflare account id; derives the R2 endpoint
    endpoint_url: str | None = None  # Overrides account_id (MinIO, AWS, ...)
    region: str = "auto"


class DedupConfig(BaseModel):
    """Archived-message markers."""
    enabled: bool = False
    redis_url: str = ""  # Empty keeps markers in process memory
    ttl_seconds: int = 86400


class WebhookConfig(BaseModel):
    """Webhook server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080
    path: str = "/telegram/webhook"
    public_url: str = ""  # External URL registered with Telegram


class PollConfig(BaseModel):
    """Long-poll loop for local development."""
    interval_s: float = 5.0
    limit: int = 100


class LoggingConfig(BaseModel):
    level: str = "INFO"


class Config(BaseSettings):
    """Root configuration for mediakeeper."""
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    dedup: DedupConfig = Field(default_factory=DedupConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    poll: PollConfig = Field(default_factory=PollConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def webhook_url(self) -> str | None:
        """Full URL Telegram should push updates to."""
        if not self.webhook.public_url:
            return None
        return self.webhook.public_url.rstrip("/") + self.webhook.path

    class Config:
        env_prefix = "MEDIAKEEPER_"
        env_nested_delimiter = "__"
