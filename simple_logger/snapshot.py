"""Turns arbitrary objects into snapshot entries in the ``snapshot`` stream."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Protocol, runtime_checkable

from simple_logger.errors import SimpleLoggerError, SnapshotError, WriteError, WriteErrorKind
from simple_logger.models import LogLevel, create_log_entry
from simple_logger.writer import LogWriter

logger = logging.getLogger(__name__)

SNAPSHOT_SOURCE = "snapshot"
SNAPSHOT_FUNCTION = "snapshot"
SNAPSHOT_LINE = 0

_JSON_SCALARS = (str, int, float, bool, type(None))


@runtime_checkable
class Snapshottable(Protocol):
    """Objects that know how to serialize themselves for a snapshot."""

    def serialize(self) -> bytes: ...

    def type_label(self) -> str: ...


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_object(obj) -> tuple[str, bytes]:
    """Return ``(type_label, bytes)`` for an object.

    Snapshottable objects serialize themselves. Dataclass instances,
    mappings, lists, tuples and JSON scalars are JSON encoded and labelled
    with their type name. Raises WriteError(SERIALIZATION_FAILURE) otherwise.
    """
    if isinstance(obj, Snapshottable):
        try:
            label = obj.type_label()
            data = obj.serialize()
        except Exception as e:
            raise WriteError(WriteErrorKind.SERIALIZATION_FAILURE, f"{type(obj).__name__}: {e}") from e
        if not isinstance(data, (bytes, bytearray)):
            raise WriteError(
                WriteErrorKind.SERIALIZATION_FAILURE,
                f"{label}.serialize() returned {type(data).__name__}, expected bytes",
            )
        return label, bytes(data)

    label = type(obj).__name__
    is_dataclass = dataclasses.is_dataclass(obj) and not isinstance(obj, type)
    if not (is_dataclass or isinstance(obj, (Mapping, list, tuple) + _JSON_SCALARS)):
        raise WriteError(
            WriteErrorKind.SERIALIZATION_FAILURE,
            f"{label} is neither Snapshottable nor JSON encodable",
        )

    try:
        if is_dataclass:
            # asdict deep-copies fields, which fails on locks, sockets, etc.
            payload = dataclasses.asdict(obj)
        elif isinstance(obj, Mapping):
            payload = dict(obj)
        else:
            payload = obj
        text = json.dumps(payload, default=_json_default, sort_keys=True)
    except Exception as e:
        raise WriteError(WriteErrorKind.SERIALIZATION_FAILURE, f"{label}: {e}") from e
    return label, text.encode("utf-8")


class SnapshotService:
    def __init__(self, writer: LogWriter):
        self._writer = writer

    def snapshot(self, objects: Iterable, level: LogLevel | str = LogLevel.DEBUG) -> int:
        """Write one snapshot entry per object. Returns the number written.

        Every object is attempted; if any fail, SnapshotError lists them after
        the rest have been written.
        """
        level = LogLevel.parse(level)
        written = 0
        failures = []
        for obj in objects:
            label = type(obj).__name__
            try:
                label, data = serialize_object(obj)
                entry = create_log_entry(
                    message=f"Snapshot of {label}",
                    level=level,
                    source_file=SNAPSHOT_SOURCE,
                    function=SNAPSHOT_FUNCTION,
                    line=SNAPSHOT_LINE,
                    object_name=label,
                    object_data=data,
                    is_snapshot=True,
                )
                self._writer.append(entry)
            except SimpleLoggerError as e:
                logger.warning("Snapshot of %s failed: %s", label, e)
                failures.append((label, e))
            else:
                written += 1

        if failures:
            raise SnapshotError(failures)
        return written
