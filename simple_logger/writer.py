"""Append-and-rotate writer for per-source JSON destination files."""

import logging
import os
import tempfile
import threading

from simple_logger.directory import LogDirectory
from simple_logger.errors import CorruptFileError, WriteError, WriteErrorKind
from simple_logger.models import (
    LogEntry,
    decode_entries,
    destination_file_name,
    encode_entry,
    encoded_array_size,
    join_encoded,
)

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MiB

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def destination_lock(path: str) -> threading.Lock:
    """Return the process-wide lock for a destination path, creating it on demand."""
    key = os.path.abspath(path)
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _locks[key] = lock
        return lock


def read_entries(path: str) -> list[LogEntry]:
    """Decode a destination file. Missing file is an empty list.

    Raises CorruptFileError if the file exists but is not a valid entry array.
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        return []

    try:
        return decode_entries(raw)
    except (ValueError, KeyError, TypeError, RecursionError) as e:
        raise CorruptFileError(path, str(e)) from e


def trim_oldest(sizes: list[int], max_bytes: int) -> int:
    """Number of leading entries to drop so the array fits in ``max_bytes``.

    The last entry is never dropped, even if it alone exceeds the limit.
    """
    total = encoded_array_size(sizes)
    count = len(sizes)
    dropped = 0
    while total > max_bytes and count - dropped > 1:
        total -= sizes[dropped] + 1  # entry plus its separating comma
        dropped += 1
    return dropped


class LogWriter:
    def __init__(self, directory: LogDirectory, max_file_size_bytes: int = MAX_FILE_SIZE_BYTES):
        self._directory = directory
        self._max_bytes = max_file_size_bytes

    def destination_path(self, source_file: str) -> str:
        return os.path.join(self._directory.resolve(), destination_file_name(source_file))

    def append(self, entry: LogEntry) -> int:
        """Append an entry to its destination file. Returns how many old entries were evicted.

        Raises DirectoryError, CorruptFileError, or WriteError. A corrupt
        destination is left untouched.
        """
        path = self.destination_path(entry.source_file)

        try:
            encoded_new = encode_entry(entry)
        except (TypeError, ValueError) as e:
            raise WriteError(WriteErrorKind.SERIALIZATION_FAILURE, str(e)) from e

        with destination_lock(path):
            try:
                existing = read_entries(path)
            except OSError as e:
                raise WriteError(WriteErrorKind.IO_FAILURE, f"read {path}: {e}") from e

            try:
                encoded = [encode_entry(item) for item in existing]
            except (TypeError, ValueError) as e:
                raise WriteError(WriteErrorKind.SERIALIZATION_FAILURE, str(e)) from e
            encoded.append(encoded_new)

            dropped = trim_oldest([len(b) for b in encoded], self._max_bytes)
            if dropped:
                encoded = encoded[dropped:]
                logger.info(
                    "Rotated %s: evicted %d oldest entr%s",
                    os.path.basename(path), dropped, "y" if dropped == 1 else "ies",
                )

            self._replace(path, join_encoded(encoded))
        return dropped

    def _replace(self, path: str, payload: bytes):
        """Write to a temp file in the same directory, then rename over ``path``."""
        directory = os.path.dirname(path)
        prefix = "." + os.path.basename(path) + "."
        try:
            fd, tmp = tempfile.mkstemp(dir=directory, prefix=prefix, suffix=".tmp")
        except OSError as e:
            raise WriteError(WriteErrorKind.IO_FAILURE, f"create temp file: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError as e:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise WriteError(WriteErrorKind.IO_FAILURE, f"write {path}: {e}") from e
