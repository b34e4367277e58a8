"""Shared pytest fixtures for the simple_logger test suite."""

from __future__ import annotations

import pytest

import simple_logger
from simple_logger.config import Config
from simple_logger.directory import LogDirectory
from simple_logger.store import LogStore
from simple_logger.validator import LogEntryValidator
from simple_logger.writer import LogWriter


@pytest.fixture()
def config(tmp_path) -> Config:
    """Config rooted in a per-test temporary storage directory."""
    return Config(storage_dir=str(tmp_path / "storage"))


@pytest.fixture(autouse=True)
def isolated_storage(config):
    """Keep facade calls away from the real home directory."""
    simple_logger.configure(config)
    yield


@pytest.fixture()
def directory(config) -> LogDirectory:
    return LogDirectory(config)


@pytest.fixture()
def log_root(directory) -> str:
    return directory.resolve()


@pytest.fixture()
def writer(directory) -> LogWriter:
    return LogWriter(directory)


@pytest.fixture()
def store(directory) -> LogStore:
    return LogStore(directory)


@pytest.fixture()
def validator() -> LogEntryValidator:
    return LogEntryValidator()


@pytest.fixture()
def sample_wire_entry() -> dict:
    """A wire entry as written by the writer for a plain message."""
    return {
        "message": "start",
        "objectName": None,
        "objectData": None,
        "level": "INFO",
        "isSnapshot": False,
        "file": "/app/Foo.py",
        "function": "run",
        "line": 7,
        "timestamp": "2025-05-15T14:30:00+00:00",
    }
