"""Messaging platform interface used to download media."""

from abc import ABC, abstractmethod
from typing import Any


class PlatformError(Exception):
    """Base error for messaging platform calls."""


class FileNotAvailableError(PlatformError):
    """The file reference could not be resolved to a download handle."""


class PlatformTransportError(PlatformError):
    """Downloading or talking to the platform failed."""


class MessagingPlatform(ABC):
    """Two-step file download: resolve a transient handle, then fetch bytes."""

    name: str = "base"

    @abstractmethod
    async def resolve_download_handle(self, file_ref: str) -> Any:
        """Resolve a stable file reference. Raises FileNotAvailableError."""

    @abstractmethod
    async def fetch_bytes(self, handle: Any) -> bytes:
        """Download the file behind *handle*. Raises PlatformTransportError."""
