"""Config file loading."""

import json
import os
import re
from pathlib import Path
from typing import Any

from mediakeeper.config.schema import Config


def get_data_dir() -> Path:
    """Return the mediakeeper data directory."""
    return Path.home() / ".mediakeeper"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_data_dir() / "config.json"


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def convert_keys(data: Any) -> Any:
    """Recursively convert camelCase dict keys to snake_case."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Recursively convert snake_case dict keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def read_camel_json(path: Path) -> dict[str, Any] | None:
    """Read a camelCase JSON file as snake_case keys, or None if it is missing."""
    if not path.exists():
        return None
    with open(path) as f:
        return convert_keys(json.load(f))


def write_camel_json(path: Path, data: dict[str, Any], mode: int | None = None) -> None:
    """Write snake_case data as camelCase JSON, optionally chmod-ing the file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(convert_to_camel(data), f, indent=2)
    if mode is not None:
        os.chmod(path, mode)


def load_config(config_path: Path | None = None) -> Config:
    """Load config from file, falling back to environment and defaults.

    Values in the file take precedence over ``MEDIAKEEPER_*`` environment
    variables for the same field.
    """
    path = config_path or get_config_path()

    try:
        data = read_camel_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        print(f"Warning: Failed to load config from {path}: {e}")
        print("Using default configuration.")
        return Config()

    if data is None:
        return Config()
    try:
        return Config(**data)
    except (TypeError, ValueError) as e:
        print(f"Warning: Invalid config in {path}: {e}")
        print("Using default configuration.")
        return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save config to file with camelCase keys."""
    write_camel_json(config_path or get_config_path(), config.model_dump())
