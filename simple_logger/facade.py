"""Public entry points composing the writer, store, and snapshot service.

Append paths (``log``, ``snapshot`` and the level shortcuts) never raise
engine errors: they return ``None`` on success or the error on failure.
Read, delete and export paths raise.
"""

import logging
import sys

from simple_logger.config import Config
from simple_logger.directory import default_directory, set_default_directory
from simple_logger.errors import SimpleLoggerError, WriteError, WriteErrorKind
from simple_logger.models import AggregateStats, LogEntry, LogFileSummary, LogLevel, create_log_entry
from simple_logger.snapshot import SnapshotService, serialize_object
from simple_logger.store import LogStore
from simple_logger.writer import LogWriter

logger = logging.getLogger(__name__)


def configure(config: Config):
    """Point the process at a new storage root (takes effect on the next call)."""
    set_default_directory(config)


def _enabled() -> bool:
    return default_directory().config.enabled


def _store() -> LogStore:
    return LogStore(default_directory())


def _log(message: str, obj, level, stacklevel: int) -> SimpleLoggerError | None:
    frame = sys._getframe(stacklevel)
    source_file = frame.f_code.co_filename
    function = frame.f_code.co_name
    line = frame.f_lineno
    del frame

    try:
        if not _enabled():
            return None

        try:
            level = LogLevel.parse(level)
        except ValueError as e:
            raise WriteError(WriteErrorKind.SERIALIZATION_FAILURE, str(e)) from e

        object_name = object_data = None
        if obj is not None:
            object_name, object_data = serialize_object(obj)

        entry = create_log_entry(
            message=str(message),
            level=level,
            source_file=source_file,
            function=function,
            line=line,
            object_name=object_name,
            object_data=object_data,
        )
        LogWriter(default_directory()).append(entry)
    except SimpleLoggerError as e:
        logger.warning("Dropped log entry from %s:%d: %s", source_file, line, e)
        return e
    return None


def log(message: str, obj=None, level: LogLevel | str = LogLevel.INFO) -> SimpleLoggerError | None:
    """Record ``message`` (and optionally ``obj``) under the caller's source file."""
    return _log(message, obj, level, stacklevel=2)


def debug(message: str, obj=None) -> SimpleLoggerError | None:
    return _log(message, obj, LogLevel.DEBUG, stacklevel=2)


def info(message: str, obj=None) -> SimpleLoggerError | None:
    return _log(message, obj, LogLevel.INFO, stacklevel=2)


def warning(message: str, obj=None) -> SimpleLoggerError | None:
    return _log(message, obj, LogLevel.WARNING, stacklevel=2)


def error(message: str, obj=None) -> SimpleLoggerError | None:
    return _log(message, obj, LogLevel.ERROR, stacklevel=2)


def critical(message: str, obj=None) -> SimpleLoggerError | None:
    return _log(message, obj, LogLevel.CRITICAL, stacklevel=2)


def snapshot(*objects, level: LogLevel | str = LogLevel.DEBUG) -> SimpleLoggerError | None:
    """Write each object as a snapshot entry in the ``snapshot`` stream."""
    try:
        if not _enabled():
            return None
        service = SnapshotService(LogWriter(default_directory()))
        service.snapshot(objects, level=level)
    except SimpleLoggerError as e:
        logger.warning("Snapshot incomplete: %s", e)
        return e
    except ValueError as e:
        # unknown level name
        logger.warning("Snapshot rejected: %s", e)
        return WriteError(WriteErrorKind.SERIALIZATION_FAILURE, str(e))
    return None


def list_log_files() -> list[LogFileSummary]:
    return _store().list_files()


def load_log_entries(identifier: str) -> list[LogEntry]:
    return _store().load_entries(identifier)


def delete_log_file(identifier: str):
    _store().delete_file(identifier)


def clear_logs():
    _store().clear_all()


def log_file_stats() -> AggregateStats:
    return _store().stats()


def export_logs(destination: str) -> str:
    """Zip every log file into ``destination`` for attaching to a report."""
    return _store().export_archive(destination)
