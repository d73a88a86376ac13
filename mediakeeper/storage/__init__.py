"""Blob and dedup stores."""

from mediakeeper.storage.base import DEFAULT_TTL_SECONDS, BlobStore, DedupStore, StoreError

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "BlobStore",
    "DedupStore",
    "StoreError",
]
