"""Log entry model, wire encoding, and derived summary types."""

from __future__ import annotations

import base64
import json
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from simple_logger.validator import LogEntryValidator

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")

DESTINATION_SUFFIX = ".json"

_validator = LogEntryValidator()


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def parse(cls, value: "LogLevel | str") -> "LogLevel":
        """Accept a LogLevel or a level name in any case ("warn" included)."""
        if isinstance(value, cls):
            return value
        token = str(value).strip().upper()
        if token == "WARN":
            token = "WARNING"
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Unknown log level: {value!r}") from None


@dataclass(frozen=True)
class LogEntry:
    message: str
    level: LogLevel
    source_file: str
    function: str
    line: int
    timestamp: datetime
    object_name: str | None = None
    object_data: bytes | None = None
    is_snapshot: bool = False

    def __post_init__(self):
        if (self.object_name is None) != (self.object_data is None):
            raise ValueError("object_name and object_data must be given together")
        if self.is_snapshot and self.object_name is None:
            raise ValueError("snapshot entries require an object_name/object_data pair")
        if self.timestamp.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware")

    @property
    def identifier(self) -> str:
        """Source identifier of the destination file this entry belongs to."""
        return sanitize_identifier(self.source_file)


def create_log_entry(
    message: str,
    level: LogLevel | str = LogLevel.INFO,
    source_file: str = "unknown",
    function: str = "",
    line: int = 0,
    object_name: str | None = None,
    object_data: bytes | None = None,
    is_snapshot: bool = False,
) -> LogEntry:
    return LogEntry(
        message=message,
        level=LogLevel.parse(level),
        source_file=source_file,
        function=function,
        line=line,
        timestamp=datetime.now(timezone.utc),
        object_name=object_name,
        object_data=object_data,
        is_snapshot=is_snapshot,
    )


def sanitize_identifier(source: str) -> str:
    """Reduce a source file path to a filesystem-safe destination name.

    ``/app/views/Foo Bar.py`` becomes ``Foo_Bar``. Already sanitized
    identifiers come back unchanged, as do names ending in ``.json``.
    """
    base = os.path.basename(source.replace("\\", "/"))
    stem, ext = os.path.splitext(base)
    if stem and ext:
        base = stem
    cleaned = _UNSAFE_CHARS.sub("_", base)
    return cleaned or "unknown"


def destination_file_name(source: str) -> str:
    return sanitize_identifier(source) + DESTINATION_SUFFIX


def entry_to_dict(entry: LogEntry) -> dict:
    data = None
    if entry.object_data is not None:
        data = base64.b64encode(entry.object_data).decode("ascii")
    return {
        "message": entry.message,
        "objectName": entry.object_name,
        "objectData": data,
        "level": entry.level.value,
        "isSnapshot": entry.is_snapshot,
        "file": entry.source_file,
        "function": entry.function,
        "line": entry.line,
        "timestamp": entry.timestamp.isoformat(),
    }


def entry_from_dict(d) -> LogEntry:
    """Rebuild a LogEntry from its wire dict.

    The dict is checked against the log entry schema first. Raises
    ValueError on malformed input.
    """
    is_valid, errors = _validator.validate(d)
    if not is_valid:
        raise ValueError("; ".join(errors))

    raw_data = d.get("objectData")
    object_data = None
    if raw_data is not None:
        object_data = base64.b64decode(raw_data, validate=True)

    raw_ts = d["timestamp"]
    if raw_ts.endswith("Z"):
        raw_ts = raw_ts[:-1] + "+00:00"
    timestamp = datetime.fromisoformat(raw_ts)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    return LogEntry(
        message=d["message"],
        level=LogLevel(d["level"]),
        source_file=d.get("file", ""),
        function=d.get("function", ""),
        line=int(d.get("line", 0)),
        timestamp=timestamp,
        object_name=d.get("objectName"),
        object_data=object_data,
        is_snapshot=d.get("isSnapshot", False),
    )


def encode_entry(entry: LogEntry) -> bytes:
    """Compact ASCII JSON encoding of a single entry, as stored on disk."""
    return json.dumps(entry_to_dict(entry), separators=(",", ":")).encode("ascii")


def join_encoded(encoded: list[bytes]) -> bytes:
    """Assemble pre-encoded entries into the on-disk JSON array."""
    return b"[" + b",".join(encoded) + b"]"


def encoded_array_size(sizes: list[int]) -> int:
    """Byte size of ``join_encoded`` output for entries of the given sizes."""
    if not sizes:
        return 2
    return 2 + sum(sizes) + len(sizes) - 1


def decode_entries(raw: bytes) -> list[LogEntry]:
    """Parse a destination file's bytes. Zero-length content is an empty list."""
    if not raw.strip():
        return []
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")
    return [entry_from_dict(item) for item in data]


def _empty_level_counts() -> dict[LogLevel, int]:
    return {level: 0 for level in LogLevel}


@dataclass
class LogFileSummary:
    file_name: str
    identifier: str
    size: int
    last_modified: datetime
    level_counts: dict[LogLevel, int] = field(default_factory=_empty_level_counts)
    entry_count: int = 0
    corrupt: bool = False


@dataclass
class AggregateStats:
    file_count: int = 0
    total_size: int = 0
