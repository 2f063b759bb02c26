"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from statekeeper.storage.base import MemoryStoreFactory
from statekeeper.tracking.tracker import StateTracker
from statekeeper.triggers.persist import ManualPersistTrigger

# Keep the default tracker off the filesystem during tests
os.environ.setdefault("SK_STORE_BACKEND", "memory")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store_factory() -> MemoryStoreFactory:
    """Provide an in-memory store factory."""
    return MemoryStoreFactory()


@pytest.fixture
def trigger() -> ManualPersistTrigger:
    """Provide a manually fired persist trigger."""
    return ManualPersistTrigger()


@pytest.fixture
def tracker(store_factory: MemoryStoreFactory, trigger: ManualPersistTrigger) -> StateTracker:
    """Provide a tracker backed by memory stores and a manual trigger."""
    return StateTracker(store_factory, trigger, name="test")
