"""Shared fixtures."""

import pytest

from mediakeeper.storage.memory import MemoryBlobStore


@pytest.fixture
def blob_store():
    return MemoryBlobStore()
