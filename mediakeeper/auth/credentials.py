"""Credentials schema and persistence (separate from config)."""

import json
from pathlib import Path

from pydantic import BaseModel, Field

from mediakeeper.config.loader import get_data_dir, read_camel_json, write_camel_json

CREDENTIALS_FILE_MODE = 0o600


class TelegramCredentials(BaseModel):
    """Bot credentials."""
    bot_token: str = ""  # Bot token from @BotFather
    webhook_secret: str = ""  # Sent back by Telegram in X-Telegram-Bot-Api-Secret-Token


class StorageCredentials(BaseModel):
    """Object storage access keys."""
    access_key_id: str = ""
    secret_access_key: str = ""


class Credentials(BaseModel):
    """Root credentials model, kept out of config.json."""
    telegram: TelegramCredentials = Field(default_factory=TelegramCredentials)
    storage: StorageCredentials = Field(default_factory=StorageCredentials)


def get_credentials_path() -> Path:
    return get_data_dir() / "credentials.json"


def load_credentials(creds_path: Path | None = None) -> Credentials:
    """Load credentials, or empty ones if the file is missing or unreadable.

    Empty credentials make the CLI refuse to start, so a broken file is
    reported rather than silently ignored.
    """
    path = creds_path or get_credentials_path()
    try:
        data = read_camel_json(path)
        return Credentials() if data is None else Credentials.model_validate(data)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        print(f"Warning: Ignoring unreadable credentials in {path}: {e}")
        return Credentials()


def save_credentials(creds: Credentials, creds_path: Path | None = None) -> None:
    """Write credentials readable by the owner only."""
    write_camel_json(
        creds_path or get_credentials_path(),
        creds.model_dump(),
        mode=CREDENTIALS_FILE_MODE,
    )
